from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import to_http_error
from src.app.services.session_manager import SessionFilter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import Principal
from src.app.use_cases.sessions import (
    ListSessionsUseCase,
    RevokeOtherSessionsResponse,
    RevokeOtherSessionsUseCase,
    RevokeSessionResponse,
    RevokeSessionUseCase,
    SessionListResponse,
)
from src.depends import get_current_principal, get_unit_of_work
from src.domain.base import to_naive_utc

router = APIRouter(prefix="/auth/{role}/sessions", tags=["Sessions"])


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List the caller's active sessions, oldest first"""
    result = await ListSessionsUseCase(uow).execute(principal)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class RevokeOtherSessionsRequest(BaseModel):
    """Request to revoke the caller's other sessions"""

    revoke_current: bool = Field(
        False, description="Also revoke the session making this call"
    )
    reason: Optional[str] = Field(None, max_length=255)

    # Optional narrowing of the sessions to revoke
    ip: Optional[str] = Field(None, max_length=64)
    user_agent: Optional[str] = Field(
        None, max_length=512, description="Matches sessions whose user agent contains it"
    )
    issued_before: Optional[datetime] = None
    expires_before: Optional[datetime] = None

    def session_filter(self) -> Optional[SessionFilter]:
        if (
            self.ip is None
            and self.user_agent is None
            and self.issued_before is None
            and self.expires_before is None
        ):
            return None
        return SessionFilter(
            ip=self.ip,
            user_agent=self.user_agent,
            issued_before=to_naive_utc(self.issued_before) if self.issued_before else None,
            expires_before=to_naive_utc(self.expires_before) if self.expires_before else None,
        )


@router.post(
    "/revoke-others",
    status_code=status.HTTP_200_OK,
    response_model=RevokeOtherSessionsResponse,
)
async def revoke_other_sessions(
    body: RevokeOtherSessionsRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Other Sessions

    Without revoke_current the caller's own session always survives,
    or the oldest active one when the token carries no session. ip,
    user_agent, issued_before and expires_before narrow the revoked set.
    """
    result = await RevokeOtherSessionsUseCase(uow).execute(
        principal,
        revoke_current=body.revoke_current,
        reason=body.reason,
        session_filter=body.session_filter(),
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionResponse,
)
async def revoke_session(
    session_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Session

    Idempotent. Unknown ids and ids of other users' sessions answer exactly
    like an already revoked session.
    """
    result = await RevokeSessionUseCase(uow).execute(principal, session_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
