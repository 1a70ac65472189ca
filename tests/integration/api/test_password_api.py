import pytest

from src.depends import get_notifier
from tests.integration.api_helpers import PASSWORD, RecordingNotifier, bearer, join, login

NEW_PASSWORD = "N3wPassword!"

async def request_reset(client, email):
    return await client.post("/auth/todoUser/password/reset/request", json={"email": email})

async def confirm_reset(client, token, new_password=NEW_PASSWORD):
    return await client.post(
        "/auth/todoUser/password/reset/confirm",
        json={"token": token, "new_password": new_password},
    )

@pytest.mark.asyncio
async def test_reset_request_does_not_reveal_accounts(client, notifier):
    await join(client)

    known = await request_reset(client, "user@acme.io")
    unknown = await request_reset(client, "nobody@acme.io")

    assert known.status_code == unknown.status_code == 200
    assert set(known.json()) == set(unknown.json())
    assert known.json()["note"] == unknown.json()["note"]
    assert notifier.last("password_reset", "user@acme.io") not in known.text
    assert not [s for s in notifier.sent if s.email == "nobody@acme.io"]

@pytest.mark.asyncio
async def test_reset_confirm_revokes_every_session(client, notifier):
    joined = await join(client)
    second = await login(client)
    await request_reset(client, "user@acme.io")
    token = notifier.last("password_reset", "user@acme.io")

    response = await confirm_reset(client, token)

    assert response.status_code == 200
    assert response.json()["revoked_sessions_count"] == 2

    for old in (joined, second):
        me = await client.get("/auth/todoUser/me", headers=bearer(old))
        assert me.status_code == 401
        refresh = await client.post(
            "/auth/todoUser/refresh", json={"refresh_token": old["token"]["refresh"]}
        )
        assert refresh.status_code == 401

    old_login = await client.post(
        "/auth/todoUser/login", json={"email": "user@acme.io", "password": PASSWORD}
    )
    assert old_login.status_code == 401
    await login(client, password=NEW_PASSWORD)

@pytest.mark.asyncio
async def test_reset_token_is_single_use(client, notifier):
    await join(client)
    await request_reset(client, "user@acme.io")
    token = notifier.last("password_reset", "user@acme.io")

    assert (await confirm_reset(client, token)).status_code == 200
    reused = await confirm_reset(client, token, new_password="An0therPassword")

    assert reused.status_code == 400
    assert reused.json()["error"]["code"] == "INVALID_RESET_TOKEN"

@pytest.mark.asyncio
async def test_reset_with_unknown_token(client):
    response = await confirm_reset(client, "made-up-token")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_RESET_TOKEN"

@pytest.mark.asyncio
async def test_change_password_keeps_only_current_session(client):
    joined = await join(client)
    current = await login(client)

    response = await client.put(
        "/auth/todoUser/password",
        headers=bearer(current),
        json={"current_password": PASSWORD, "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["revoked_sessions_count"] == 1
    assert (await client.get("/auth/todoUser/me", headers=bearer(current))).status_code == 200
    assert (await client.get("/auth/todoUser/me", headers=bearer(joined))).status_code == 401
    await login(client, password=NEW_PASSWORD)

@pytest.mark.asyncio
async def test_change_password_with_wrong_current(client):
    joined = await join(client)

    response = await client.put(
        "/auth/todoUser/password",
        headers=bearer(joined),
        json={"current_password": "WrongPassw0rd", "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INVALID_CURRENT_PASSWORD"
    await login(client)

@pytest.mark.asyncio
async def test_change_password_requires_token(client):
    response = await client.put(
        "/auth/todoUser/password",
        json={"current_password": PASSWORD, "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 401

class FailingNotifier(RecordingNotifier):
    async def send_password_reset(self, email, token, expires_at):
        raise RuntimeError("mail relay unavailable")

@pytest.mark.asyncio
async def test_reset_request_survives_failing_mail_delivery(app, client):
    await join(client)
    app.dependency_overrides[get_notifier] = lambda: FailingNotifier()

    known = await request_reset(client, "user@acme.io")
    unknown = await request_reset(client, "nobody@acme.io")

    assert known.status_code == unknown.status_code == 200
    assert known.json()["note"] == unknown.json()["note"]
