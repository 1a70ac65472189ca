from datetime import timedelta
from uuid import uuid4

import pytest

from src.domain.base import utc_now
from src.domain.entities import (
    RefreshToken,
    RoleGrant,
    RoleType,
    Session,
    TokenState,
    User,
    UserStatus,
)
from src.domain.policies import (
    ROLE_REQUIRES_VERIFIED_EMAIL,
    is_role_grant_live,
    is_session_active,
    refresh_token_state,
)


def make_user(**overrides):
    data = dict(
        id=uuid4(),
        email="user@example.com",
        password_hash="x",
        status=UserStatus.active,
        email_verified=True,
    )
    data.update(overrides)
    return User(**data)


def make_grant(user, role=RoleType.todo_user, **overrides):
    return RoleGrant(id=uuid4(), user_id=user.id, role=role, **overrides)


def test_every_role_has_a_verification_policy():
    assert set(ROLE_REQUIRES_VERIFIED_EMAIL) == set(RoleType)
    assert ROLE_REQUIRES_VERIFIED_EMAIL[RoleType.admin] is True
    assert ROLE_REQUIRES_VERIFIED_EMAIL[RoleType.system_admin] is True
    assert ROLE_REQUIRES_VERIFIED_EMAIL[RoleType.todo_user] is False
    assert ROLE_REQUIRES_VERIFIED_EMAIL[RoleType.guest_visitor] is False


def test_live_grant():
    user = make_user()
    assert is_role_grant_live(make_grant(user), user, RoleType.todo_user)


@pytest.mark.parametrize(
    "grant_overrides,user_overrides",
    [
        ({"revoked_at": utc_now()}, {}),
        ({"deleted_at": utc_now()}, {}),
        ({}, {"deleted_at": utc_now()}),
        ({}, {"status": UserStatus.suspended}),
        ({}, {"status": UserStatus.disabled}),
    ],
)
def test_dead_grant(grant_overrides, user_overrides):
    user = make_user(**user_overrides)
    grant = make_grant(user, **grant_overrides)
    assert not is_role_grant_live(grant, user, RoleType.todo_user)


def test_grant_for_other_role_is_not_live():
    user = make_user()
    grant = make_grant(user, role=RoleType.todo_user)
    assert not is_role_grant_live(grant, user, RoleType.admin)


def test_missing_grant_or_user():
    user = make_user()
    assert not is_role_grant_live(None, user, RoleType.todo_user)
    assert not is_role_grant_live(make_grant(user), None, RoleType.todo_user)


def test_elevated_role_requires_verified_email():
    user = make_user(email_verified=False)
    assert not is_role_grant_live(make_grant(user, RoleType.admin), user, RoleType.admin)
    assert is_role_grant_live(make_grant(user), user, RoleType.todo_user)


def test_session_activity():
    now = utc_now()
    session = Session(id=uuid4(), user_id=uuid4(), role=RoleType.todo_user,
                      expires_at=now + timedelta(days=1))
    assert is_session_active(session, now)

    session.revoked_at = now
    assert not is_session_active(session, now)

    expired = Session(id=uuid4(), user_id=uuid4(), role=RoleType.todo_user, expires_at=now)
    assert not is_session_active(expired, now)
    assert not is_session_active(None, now)


def test_refresh_token_states():
    now = utc_now()

    def token(**overrides):
        return RefreshToken(
            id=uuid4(),
            session_id=uuid4(),
            token_hash="h",
            expires_at=overrides.pop("expires_at", now + timedelta(days=1)),
            **overrides,
        )

    assert refresh_token_state(token(), now) == TokenState.active
    assert refresh_token_state(token(rotated_at=now), now) == TokenState.rotated
    assert refresh_token_state(token(revoked_at=now), now) == TokenState.revoked
    assert refresh_token_state(token(expires_at=now), now) == TokenState.expired
    # Rotation is reported even after expiry
    assert (
        refresh_token_state(token(rotated_at=now, expires_at=now - timedelta(days=1)), now)
        == TokenState.rotated
    )
