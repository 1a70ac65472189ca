from libs.result import Result, Return
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import Principal
from src.domain.base import as_utc, utc_now
from .dtos import SessionInfo, SessionListResponse


class ListSessionsUseCase:
    """Lists the caller's active sessions, oldest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: Principal) -> Result[SessionListResponse]:
        async with self.uow:
            sessions = await SessionManager(self.uow).find_active_sessions(
                principal.user_id, utc_now()
            )
            return Return.ok(
                SessionListResponse(
                    sessions=[
                        SessionInfo(
                            id=s.id,
                            role=s.role,
                            ip=s.ip,
                            user_agent=s.user_agent,
                            issued_at=as_utc(s.issued_at),
                            expires_at=as_utc(s.expires_at),
                            current=s.id == principal.session_id,
                        )
                        for s in sessions
                    ]
                )
            )
