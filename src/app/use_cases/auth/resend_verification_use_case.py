"""
Resend Verification Email Use Case

Issues a fresh email verification token without revealing account
existence.
"""

import logging
import secrets
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.notifier import INotifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, hash_token, utc_now
from src.domain.entities import EmailVerification
from .dtos import ResendVerificationResponse

logger = logging.getLogger(__name__)

RESEND_NOTE = "If the email belongs to an unverified account, a verification link has been sent"


class ResendVerificationUseCase:
    """
    Use case for resending email verification.

    Business Rules:
    - Same response for unknown, verified and unverified emails
    - A new token is stored only for an unverified account; earlier tokens
      stay valid until they expire or one is consumed
    - Token expiry is 24 hours from now by default
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotifier,
        verification_ttl: timedelta = timedelta(hours=24),
    ):
        self.uow = uow
        self.notifier = notifier
        self.verification_ttl = verification_ttl

    async def execute(self, email: str) -> Result[ResendVerificationResponse]:
        email = email.lower()

        async with self.uow:
            now = utc_now()
            user = await self.uow.users.get_by_email(email)

            token = secrets.token_urlsafe(32)
            expires_at = now + self.verification_ttl

            recipient = None
            if user is not None and not user.email_verified:
                await self.uow.email_verifications.create(
                    EmailVerification(
                        user_id=user.id,
                        target_email=user.email,
                        token_hash=hash_token(token),
                        sent_at=now,
                        expires_at=expires_at,
                        created_at=now,
                        updated_at=now,
                    )
                )
                recipient = user.email
                await self.uow.commit()

        if recipient is not None:
            try:
                await self.notifier.send_email_verification(recipient, token, expires_at)
            except Exception:
                logger.exception("Email verification notification failed")

        return Return.ok(
            ResendVerificationResponse(
                email=email, requested_at=as_utc(now), note=RESEND_NOTE
            )
        )
