from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.use_cases.auth.dtos import JoinCommand
from src.app.use_cases.auth.join_use_case import JoinUseCase
from src.domain.base import hash_token
from src.domain.entities import RoleType, User


def make_use_case(mock_uow, token_issuer, password_hasher, notifier):
    return JoinUseCase(mock_uow, token_issuer, password_hasher, notifier)


@pytest.mark.asyncio
async def test_successful_join(mock_uow, token_issuer, password_hasher, notifier):
    mock_uow.users.get_by_email.return_value = None

    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.todo_user, email="New@X.com", password="Passw0rd!")
    )

    assert result.is_ok()
    user = mock_uow.users.create.call_args.args[0]
    assert user.email == "new@x.com"
    assert user.email_verified is False
    assert password_hasher.verify("Passw0rd!", user.password_hash)
    assert result.value.id == user.id

    grant = mock_uow.role_grants.create.call_args.args[0]
    assert grant.user_id == user.id
    assert grant.role == RoleType.todo_user

    mock_uow.sessions.create.assert_called_once()
    mock_uow.refresh_tokens.create.assert_called_once()
    mock_uow.commit.assert_called_once()

    verification = mock_uow.email_verifications.create.call_args.args[0]
    email, raw_token, _ = notifier.send_email_verification.call_args.args
    assert email == "new@x.com"
    assert verification.token_hash == hash_token(raw_token)


@pytest.mark.asyncio
async def test_duplicate_email(mock_uow, token_issuer, password_hasher, notifier):
    mock_uow.users.get_by_email.return_value = User(id=uuid4(), email="a@x.com")

    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.todo_user, email="a@x.com", password="Passw0rd!")
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_uniqueness_violation_maps_to_conflict(
    mock_uow, token_issuer, password_hasher, notifier
):
    mock_uow.users.get_by_email.return_value = None
    mock_uow.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE"))

    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.todo_user, email="a@x.com", password="Passw0rd!")
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    notifier.send_email_verification.assert_not_called()


@pytest.mark.asyncio
async def test_guest_may_join_without_credentials(
    mock_uow, token_issuer, password_hasher, notifier
):
    mock_uow.users.get_by_email.return_value = None

    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.guest_visitor)
    )

    assert result.is_ok()
    user = mock_uow.users.create.call_args.args[0]
    assert user.email.startswith("guest+")
    assert user.email.endswith("@guest.local")
    mock_uow.email_verifications.create.assert_not_called()
    notifier.send_email_verification.assert_not_called()


@pytest.mark.asyncio
async def test_non_guest_requires_credentials(
    mock_uow, token_issuer, password_hasher, notifier
):
    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.todo_user)
    )

    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_password_policy(mock_uow, token_issuer, password_hasher, notifier):
    result = await make_use_case(mock_uow, token_issuer, password_hasher, notifier).execute(
        JoinCommand(role=RoleType.todo_user, email="a@x.com", password="short")
    )

    assert result.error.code == "INVALID_PASSWORD"
    mock_uow.users.get_by_email.assert_not_called()
