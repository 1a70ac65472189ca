from typing import Optional

from libs.result import Result, Return
from src.app.services.session_manager import SessionFilter, SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import Principal
from src.domain.base import utc_now
from src.domain.entities import AuditEvent
from .dtos import RevokeOtherSessionsResponse


class RevokeOtherSessionsUseCase:
    """
    Use case for bulk session revocation.

    Business Rules:
    - revoke_current=False keeps exactly one session: the caller's own when
      it is still active, otherwise the oldest-issued
    - revoke_current=True revokes every active session
    - Refresh tokens of revoked sessions are revoked in the same transaction
    - An optional SessionFilter (ip, user_agent substring, issued_before,
      expires_before) narrows which of the other sessions are revoked
    - No matching sessions is a zero-count success
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        revoke_current: bool = False,
        reason: Optional[str] = None,
        session_filter: Optional[SessionFilter] = None,
    ) -> Result[RevokeOtherSessionsResponse]:
        reason = reason or ("revoke_all" if revoke_current else "revoke_others")

        async with self.uow:
            now = utc_now()
            summary = await SessionManager(self.uow).revoke_others(
                principal.user_id,
                revoke_current,
                reason,
                now,
                current_session_id=principal.session_id,
                session_filter=session_filter,
            )

            if summary.revoked_session_ids:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=principal.user_id,
                        action="revoke_other_sessions",
                        resource_type="sessions",
                        event_metadata={
                            "revoke_current": revoke_current,
                            "sessions_revoked": summary.revoked_sessions_count,
                        },
                        created_at=now,
                    )
                )
                await self.uow.commit()

        count = summary.revoked_sessions_count
        if count:
            message = f"Revoked {count} session(s)"
        elif session_filter is not None:
            message = "No matching sessions"
        else:
            message = "No other active sessions"

        return Return.ok(
            RevokeOtherSessionsResponse(
                revoked_sessions_count=count,
                revoked_session_ids=summary.revoked_session_ids,
                revoked_refresh_tokens_count=summary.revoked_refresh_tokens_count,
                message=message,
            )
        )
