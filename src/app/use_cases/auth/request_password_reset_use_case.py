"""
Request Password Reset Use Case

Issues a single-use reset token without revealing whether the email
belongs to an account.
"""

import logging
import secrets
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, hash_token, utc_now
from src.domain.entities import AuditEvent, PasswordReset
from .dtos import PasswordResetRequested

logger = logging.getLogger(__name__)

RESET_NOTE = "If the email belongs to an account, a reset link has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Token is generated, hashed and stored for every request; the row is
      linked to a user only when the email matches one
    - Only the SHA-256 hash of the token is stored
    - Token expires after a short TTL (1 hour by default)
    - Response shape never depends on whether the email exists
    - The raw token goes to the notifier after commit, and only for a
      matching user
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotifier,
        reset_ttl: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.notifier = notifier
        self.reset_ttl = reset_ttl

    async def execute(self, email: str) -> Result[PasswordResetRequested]:
        email = email.lower()

        async with self.uow:
            now = utc_now()
            user = await self.uow.users.get_by_email(email)

            reset_token = secrets.token_urlsafe(32)
            expires_at = now + self.reset_ttl

            reset = PasswordReset(
                user_id=user.id if user else None,
                email=email,
                token_hash=hash_token(reset_token),
                requested_at=now,
                expires_at=expires_at,
                created_at=now,
                updated_at=now,
            )
            await self.uow.password_resets.create(reset)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id if user else None,
                    action="password_reset_requested",
                    resource_type="password_resets",
                    resource_id=reset.id,
                    created_at=now,
                )
            )

            recipient = user.email if user else None
            await self.uow.commit()

        if recipient is not None:
            try:
                await self.notifier.send_password_reset(recipient, reset_token, expires_at)
            except Exception:
                # The response must not differ for known accounts
                logger.exception("Password reset notification failed")

        return Return.ok(
            PasswordResetRequested(
                email=email,
                requested_at=as_utc(now),
                expires_at=as_utc(expires_at),
                note=RESET_NOTE,
            )
        )
