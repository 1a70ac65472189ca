"""
Join Use Case

Registers a principal for one role and signs it in.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.notifier import INotifier
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_uuid, hash_token, utc_now
from src.domain.entities import (
    AuditEvent,
    EmailVerification,
    RoleGrant,
    RoleType,
    User,
    UserStatus,
)
from .authorized_session import open_authorized_session
from .dtos import AuthorizedResponse, JoinCommand
from .password_policy import validate_password

logger = logging.getLogger(__name__)

GUEST_EMAIL_DOMAIN = "guest.local"

EMAIL_ALREADY_EXISTS = Error("EMAIL_ALREADY_EXISTS", "Email already registered")


class JoinUseCase:
    """
    Join Use Case

    Business Logic:
    1. Resolve credentials (guestVisitor may join anonymously)
    2. Enforce password policy
    3. Reject duplicate email (EMAIL_ALREADY_EXISTS), including a duplicate
       that only surfaces as a uniqueness violation in the database
    4. Create User, RoleGrant and, for real emails, an EmailVerification
    5. Open a session with a root refresh token
    6. Commit atomically, then deliver the verification token
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        password_hasher: IPasswordHasher,
        notifier: INotifier,
        verification_ttl: timedelta = timedelta(hours=24),
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.password_hasher = password_hasher
        self.notifier = notifier
        self.verification_ttl = verification_ttl

    async def execute(self, command: JoinCommand) -> Result[AuthorizedResponse]:
        email = command.email
        password = command.password
        is_guest = command.role == RoleType.guest_visitor and email is None

        if is_guest:
            email = f"guest+{generate_uuid()}@{GUEST_EMAIL_DOMAIN}"
            password = password or secrets.token_urlsafe(24)
        elif email is None or password is None:
            return Return.err(
                Error("VALIDATION_ERROR", "Email and password are required")
            )

        email = email.lower()
        password_validation = validate_password(password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        try:
            async with self.uow:
                if await self.uow.users.get_by_email(email):
                    return Return.err(EMAIL_ALREADY_EXISTS)

                response, verification_token = await self._register(
                    command, email, password, is_guest
                )
                await self.uow.commit()
        except IntegrityError:
            logger.warning("Join rejected by uniqueness constraint")
            return Return.err(EMAIL_ALREADY_EXISTS)

        logger.info(f"User {response.id} joined as {command.role.value}")

        if verification_token is not None:
            token, expires_at = verification_token
            await self.notifier.send_email_verification(email, token, expires_at)

        return Return.ok(response)

    async def _register(
        self, command: JoinCommand, email: str, password: str, is_guest: bool
    ) -> Tuple[AuthorizedResponse, Optional[tuple]]:
        now = utc_now()

        user = User(
            email=email,
            password_hash=self.password_hasher.hash(password),
            status=UserStatus.active,
            email_verified=False,
            last_login_at=now,
            created_at=now,
            updated_at=now,
        )
        user = await self.uow.users.create(user)

        await self.uow.role_grants.create(
            RoleGrant(
                user_id=user.id,
                role=command.role,
                granted_at=now,
                created_at=now,
                updated_at=now,
            )
        )

        verification_token = None
        if not is_guest:
            raw_token = secrets.token_urlsafe(32)
            expires_at = now + self.verification_ttl
            await self.uow.email_verifications.create(
                EmailVerification(
                    user_id=user.id,
                    target_email=email,
                    token_hash=hash_token(raw_token),
                    sent_at=now,
                    expires_at=expires_at,
                    created_at=now,
                    updated_at=now,
                )
            )
            verification_token = (raw_token, expires_at)

        response = await open_authorized_session(
            self.uow,
            self.token_issuer,
            user,
            command.role,
            command.keep_me_signed_in,
            now,
            ip=command.ip,
            user_agent=command.user_agent,
        )

        await self.uow.audit_events.create(
            AuditEvent(
                user_id=user.id,
                action="join",
                resource_type="users",
                resource_id=user.id,
                event_metadata={"role": command.role.value, "guest": is_guest},
                created_at=now,
            )
        )
        return response, verification_token
