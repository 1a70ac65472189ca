"""
Confirm Password Reset Use Case

Consumes a reset token, rotates the credential and revokes every session.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, hash_token, utc_now
from src.domain.entities import AuditEvent, RevokedBy
from .dtos import PasswordResetCompleted
from .password_policy import validate_password

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = Error("INVALID_RESET_TOKEN", "Invalid or expired password reset token")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Unknown, consumed and expired tokens fail alike (INVALID_RESET_TOKEN)
    - A failed attempt against a known token increments failure_count
    - New password must satisfy the password policy
    - In one transaction: new password hash, token consumed, all sessions
      and refresh tokens revoked (revoked_by=system, reason=password_reset)
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, token: str, new_password: str) -> Result[PasswordResetCompleted]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from the notification)
            new_password: New password to set

        Returns:
            Result with PasswordResetCompleted, or Error

        Errors:
            - INVALID_PASSWORD: Password does not meet the policy
            - INVALID_RESET_TOKEN: Token unknown, consumed, expired or orphaned
        """
        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            now = utc_now()
            reset = await self.uow.password_resets.get_by_token_hash(hash_token(token))
            if reset is None:
                return Return.err(INVALID_RESET_TOKEN)

            user = None
            if reset.user_id is not None:
                user = await self.uow.users.get_by_id(reset.user_id)

            if (
                reset.consumed_at is not None
                or reset.expires_at <= now
                or user is None
                or user.deleted_at is not None
            ):
                reset.failure_count += 1
                reset.updated_at = now
                await self.uow.password_resets.update(reset)
                await self.uow.commit()
                logger.warning(f"Rejected password reset token {reset.id}")
                return Return.err(INVALID_RESET_TOKEN)

            # Credential first, then revocation, in the same commit
            user.password_hash = self.password_hasher.hash(new_password)
            user.updated_at = now
            await self.uow.users.update(user)

            reset.consumed_at = now
            reset.updated_at = now
            await self.uow.password_resets.update(reset)

            summary = await SessionManager(self.uow).revoke_all(
                user.id, "password_reset", RevokedBy.system, now
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_reset_confirmed",
                    resource_type="users",
                    resource_id=user.id,
                    event_metadata={
                        "reset_id": str(reset.id),
                        "sessions_revoked": summary.revoked_sessions_count,
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

        return Return.ok(
            PasswordResetCompleted(
                status="success",
                reset_at=as_utc(now),
                revoked_sessions_count=summary.revoked_sessions_count,
                message="Password has been reset successfully",
            )
        )
