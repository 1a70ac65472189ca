"""
Session Use Cases

Listing and revocation of the caller's sessions.
"""

from .list_sessions_use_case import ListSessionsUseCase
from .revoke_session_use_case import RevokeSessionUseCase
from .revoke_other_sessions_use_case import RevokeOtherSessionsUseCase
from .dtos import (
    SessionInfo,
    SessionListResponse,
    RevokeSessionResponse,
    RevokeOtherSessionsResponse,
)

__all__ = [
    "ListSessionsUseCase",
    "RevokeSessionUseCase",
    "RevokeOtherSessionsUseCase",
    "SessionInfo",
    "SessionListResponse",
    "RevokeSessionResponse",
    "RevokeOtherSessionsResponse",
]
