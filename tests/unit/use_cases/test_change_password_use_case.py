from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio

from src.app.services.session_manager import ClientContext, SessionManager
from src.app.use_cases.auth.change_password_use_case import ChangePasswordUseCase
from src.app.use_cases.auth.dtos import Principal
from src.domain.base import utc_now
from src.domain.entities import RoleType, User
from tests.unit.fakes import FakeUnitOfWork


@pytest_asyncio.fixture
async def seeded(password_hasher):
    uow = FakeUnitOfWork()
    user = await uow.users.create(
        User(id=uuid4(), email="a@x.com", password_hash=password_hasher.hash("OldPassw0rd"))
    )
    now = utc_now() - timedelta(minutes=5)
    sessions = []
    for i in range(3):
        sessions.append(
            await SessionManager(uow).create_session(
                user.id,
                RoleType.todo_user,
                ClientContext(),
                expires_at=now + timedelta(days=7),
                now=now + timedelta(seconds=i),
            )
        )
    principal = Principal(
        user_id=user.id,
        email=user.email,
        role=RoleType.todo_user,
        email_verified=False,
        session_id=sessions[1].id,
    )
    return uow, user, sessions, principal


@pytest.mark.asyncio
async def test_change_password(seeded, password_hasher):
    uow, user, sessions, principal = seeded

    result = await ChangePasswordUseCase(uow, password_hasher).execute(
        principal, "OldPassw0rd", "NewPassw0rd", revoke_other_sessions=False
    )

    assert result.value.success is True
    assert result.value.revoked_sessions_count == 0
    assert password_hasher.verify("NewPassw0rd", user.password_hash)
    assert all(s.revoked_at is None for s in sessions)
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_change_password_revokes_other_sessions_by_default(seeded, password_hasher):
    uow, user, sessions, principal = seeded

    result = await ChangePasswordUseCase(uow, password_hasher).execute(
        principal, "OldPassw0rd", "NewPassw0rd"
    )

    assert result.value.revoked_sessions_count == 2
    assert sessions[1].revoked_at is None
    assert sessions[0].revoked_reason == "password_change"
    assert sessions[2].revoked_reason == "password_change"


@pytest.mark.asyncio
async def test_wrong_current_password(seeded, password_hasher):
    uow, user, sessions, principal = seeded
    old_hash = user.password_hash

    result = await ChangePasswordUseCase(uow, password_hasher).execute(
        principal, "WrongPassw0rd", "NewPassw0rd", revoke_other_sessions=True
    )

    assert result.error.code == "INVALID_CURRENT_PASSWORD"
    assert user.password_hash == old_hash
    assert all(s.revoked_at is None for s in sessions)
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_new_password_policy(seeded, password_hasher):
    uow, user, sessions, principal = seeded

    result = await ChangePasswordUseCase(uow, password_hasher).execute(
        principal, "OldPassw0rd", "x" * 65
    )

    assert result.error.code == "INVALID_PASSWORD"
