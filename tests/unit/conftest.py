from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.jwt_token_issuer import JoseTokenIssuer


def _echo(entity):
    return entity


def _repository(*async_methods, echo=("create", "update")):
    repo = MagicMock()
    for name in async_methods:
        setattr(repo, name, AsyncMock(return_value=None))
    for name in echo:
        setattr(repo, name, AsyncMock(side_effect=_echo))
    return repo


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories; create/update return their argument"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = _repository("get_by_email", "get_by_id")
    uow.role_grants = _repository("get_by_user_and_role")
    uow.sessions = _repository("get_by_id", "get_active_by_user_id", "revoke_if_active")
    uow.sessions.get_active_by_user_id.return_value = []
    uow.refresh_tokens = _repository(
        "get_by_token_hash", "mark_rotated", "revoke_by_session_ids", echo=("create",)
    )
    uow.refresh_tokens.revoke_by_session_ids.return_value = 0
    uow.session_revocations = _repository("get_by_session_id", "upsert", echo=())
    uow.password_resets = _repository("get_by_token_hash")
    uow.email_verifications = _repository("get_by_token_hash")
    uow.login_attempts = _repository(echo=("create",))
    uow.audit_events = _repository(echo=("create",))
    return uow


@pytest.fixture
def token_issuer():
    return JoseTokenIssuer(secret_key="unit-test-secret", issuer="todo-app")


@pytest.fixture
def password_hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_password_reset = AsyncMock()
    notifier.send_email_verification = AsyncMock()
    return notifier
