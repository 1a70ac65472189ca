"""
Verify Email Use Case

Handles email verification via single-use token.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, hash_token, utc_now
from src.domain.entities import AuditEvent
from .dtos import VerifyEmailResponse

logger = logging.getLogger(__name__)

INVALID_VERIFICATION_TOKEN = Error(
    "INVALID_VERIFICATION_TOKEN", "Invalid or expired verification token"
)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token is looked up by its SHA-256 hash
    - Unknown, consumed, expired tokens and tokens whose target email no
      longer matches the user fail alike
    - A failed attempt against a known token increments failure_count
    - Sets email_verified and verified_at, consumes the token
    - Records audit event
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[VerifyEmailResponse]:
        async with self.uow:
            now = utc_now()
            verification = await self.uow.email_verifications.get_by_token_hash(
                hash_token(token)
            )
            if verification is None:
                return Return.err(INVALID_VERIFICATION_TOKEN)

            user = await self.uow.users.get_by_id(verification.user_id)
            if (
                verification.consumed_at is not None
                or verification.expires_at <= now
                or user is None
                or user.deleted_at is not None
                or user.email != verification.target_email
            ):
                verification.failure_count += 1
                verification.updated_at = now
                await self.uow.email_verifications.update(verification)
                await self.uow.commit()
                logger.warning(f"Rejected email verification token {verification.id}")
                return Return.err(INVALID_VERIFICATION_TOKEN)

            user.email_verified = True
            user.verified_at = now
            user.updated_at = now
            await self.uow.users.update(user)

            verification.consumed_at = now
            verification.updated_at = now
            await self.uow.email_verifications.update(verification)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="email_verified",
                    resource_type="users",
                    resource_id=user.id,
                    created_at=now,
                )
            )

            email = user.email
            await self.uow.commit()

        return Return.ok(
            VerifyEmailResponse(status="verified", email=email, verified_at=as_utc(now))
        )
