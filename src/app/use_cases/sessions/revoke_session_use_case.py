from uuid import UUID

from libs.result import Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import Principal
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, RevokedBy
from .dtos import RevokeSessionResponse


class RevokeSessionUseCase:
    """
    Revokes one of the caller's sessions.

    Business Rules:
    - Idempotent: unknown or already revoked ids succeed without changes
    - A session owned by another user is indistinguishable from an unknown id
    - The session's refresh tokens are revoked with it
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, principal: Principal, session_id: UUID, reason: str = "user_revoked"
    ) -> Result[RevokeSessionResponse]:
        async with self.uow:
            now = utc_now()
            revoked = await SessionManager(self.uow).revoke(
                session_id,
                reason,
                RevokedBy.user,
                now,
                owner_id=principal.user_id,
            )
            if revoked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=principal.user_id,
                        action="revoke_session",
                        resource_type="sessions",
                        resource_id=session_id,
                        created_at=now,
                    )
                )
                await self.uow.commit()

        return Return.ok(
            RevokeSessionResponse(
                session_id=session_id,
                revoked=revoked,
                message="Session revoked" if revoked else "Session already inactive",
            )
        )
