"""
Login Use Case

Verifies credentials for one role and opens a session.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, LoginAttempt
from src.domain.policies import is_role_grant_live
from .authorized_session import open_authorized_session
from .dtos import AuthorizedResponse, LoginCommand

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for login and token issuance.

    Business Rules:
    - Unknown email, wrong password, missing/dead role grant and inactive
      account all fail with the same INVALID_CREDENTIALS
    - A password check runs even when the email is unknown
    - Every attempt is recorded, failures included
    - Creates a new session with a root refresh token
    - Updates user.last_login_at
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: ITokenIssuer,
        password_hasher: IPasswordHasher,
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.password_hasher = password_hasher

    async def execute(self, command: LoginCommand) -> Result[AuthorizedResponse]:
        """
        Execute login use case.

        Args:
            command: LoginCommand with role, credentials and client context

        Returns:
            Result with AuthorizedResponse, or Error(INVALID_CREDENTIALS)
        """
        email = command.email.lower()

        async with self.uow:
            now = utc_now()
            user = await self.uow.users.get_by_email(email)

            if user is None:
                self.password_hasher.dummy_verify(command.password)
                return await self._reject(command, email, None, "unknown_email", now)

            if not self.password_hasher.verify(command.password, user.password_hash):
                return await self._reject(command, email, user.id, "bad_password", now)

            grant = await self.uow.role_grants.get_by_user_and_role(user.id, command.role)
            if not is_role_grant_live(grant, user, command.role):
                return await self._reject(command, email, user.id, "role_not_active", now)

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

            user.last_login_at = now
            user.updated_at = now
            await self.uow.users.update(user)

            await self.uow.login_attempts.create(
                LoginAttempt(
                    user_id=user.id,
                    email=email,
                    role=command.role,
                    success=True,
                    ip=command.ip,
                    user_agent=command.user_agent,
                    occurred_at=now,
                )
            )
            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="login",
                    resource_type="sessions",
                    event_metadata={"role": command.role.value},
                    created_at=now,
                )
            )

            await self.uow.commit()
            return Return.ok(response)

    async def _reject(self, command, email, user_id, reason, now) -> Result:
        await self.uow.login_attempts.create(
            LoginAttempt(
                user_id=user_id,
                email=email,
                role=command.role,
                success=False,
                failure_reason=reason,
                ip=command.ip,
                user_agent=command.user_agent,
                occurred_at=now,
            )
        )
        await self.uow.commit()
        logger.warning(f"Login failed for role {command.role.value}: {reason}")
        return Return.err(INVALID_CREDENTIALS)
