from libs.result import Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, RevokedBy
from .dtos import LogoutResponse, Principal


class LogoutUseCase:
    """Revokes the caller's current session. Repeating it is harmless."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: Principal) -> Result[LogoutResponse]:
        if principal.session_id is None:
            return Return.ok(
                LogoutResponse(revoked=False, message="No session bound to this token")
            )

        async with self.uow:
            now = utc_now()
            revoked = await SessionManager(self.uow).revoke(
                principal.session_id,
                "logout",
                RevokedBy.user,
                now,
                owner_id=principal.user_id,
            )
            if revoked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=principal.user_id,
                        action="logout",
                        resource_type="sessions",
                        resource_id=principal.session_id,
                        created_at=now,
                    )
                )
            await self.uow.commit()

        return Return.ok(
            LogoutResponse(
                session_id=principal.session_id,
                revoked=revoked,
                message="Logged out",
            )
        )
