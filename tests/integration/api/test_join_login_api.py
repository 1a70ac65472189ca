import pytest

from tests.integration.api_helpers import PASSWORD, bearer, join, login


@pytest.mark.asyncio
async def test_join_returns_token_pair(client, notifier):
    body = await join(client)

    assert set(body["token"]) == {"access", "refresh", "expired_at", "refreshable_until"}
    assert notifier.last("email_verification", "user@acme.io")

    me = await client.get("/auth/todoUser/me", headers=bearer(body))
    assert me.status_code == 200
    assert me.json()["user_id"] == body["id"]
    assert me.json()["email_verified"] is False


@pytest.mark.asyncio
async def test_join_duplicate_email(client):
    await join(client)

    response = await client.post(
        "/auth/todoUser/join", json={"email": "USER@acme.io", "password": PASSWORD}
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_join_requires_credentials_for_todo_user(client):
    response = await client.post("/auth/todoUser/join", json={})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_guest_joins_anonymously(client):
    response = await client.post("/auth/guestVisitor/join", json={})

    assert response.status_code == 201
    me = await client.get("/auth/guestVisitor/me", headers=bearer(response.json()))
    assert me.status_code == 200
    assert me.json()["email"].endswith("@guest.local")


@pytest.mark.asyncio
async def test_unknown_role_is_rejected(client):
    response = await client.post(
        "/auth/superuser/join", json={"email": "a@acme.io", "password": PASSWORD}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_short_password_is_rejected(client):
    response = await client.post(
        "/auth/todoUser/join", json={"email": "a@acme.io", "password": "short"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login(client):
    joined = await join(client)

    body = await login(client)

    assert body["id"] == joined["id"]
    assert body["token"]["refresh"] != joined["token"]["refresh"]


@pytest.mark.asyncio
async def test_keep_me_signed_in_extends_refresh_horizon(client):
    await join(client)

    short = await login(client)
    response = await client.post(
        "/auth/todoUser/login",
        json={"email": "user@acme.io", "password": PASSWORD, "keep_me_signed_in": True},
    )

    assert response.status_code == 200
    assert response.json()["token"]["refreshable_until"] > short["token"]["refreshable_until"]


@pytest.mark.parametrize(
    "role, email, password",
    [
        ("todoUser", "user@acme.io", "WrongPassw0rd"),
        ("todoUser", "nobody@acme.io", PASSWORD),
        ("guestVisitor", "user@acme.io", PASSWORD),
    ],
    ids=["wrong-password", "unknown-email", "role-not-granted"],
)
@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, role, email, password):
    await join(client)

    response = await client.post(
        f"/auth/{role}/login", json={"email": email, "password": password}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
