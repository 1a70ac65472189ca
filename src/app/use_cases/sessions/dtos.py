"""
Session Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import RoleType


class SessionInfo(BaseModel):
    """One active session of the caller"""

    id: UUID
    role: RoleType
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    issued_at: datetime
    expires_at: datetime
    current: bool


class SessionListResponse(BaseModel):
    sessions: List[SessionInfo]


class RevokeSessionResponse(BaseModel):
    """Same shape whether or not the call changed anything"""

    session_id: UUID
    revoked: bool
    message: str


class RevokeOtherSessionsResponse(BaseModel):
    revoked_sessions_count: int
    revoked_session_ids: List[UUID]
    revoked_refresh_tokens_count: int
    message: str
