"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import RoleType


# ============================================================================
# Command DTOs
# ============================================================================


class JoinCommand(BaseModel):
    """
    Join command - registration intent for one role.

    email/password may be omitted only for guestVisitor.
    """

    role: RoleType
    email: Optional[str] = None
    password: Optional[str] = None
    keep_me_signed_in: bool = False
    ip: Optional[str] = None
    user_agent: Optional[str] = None


class LoginCommand(BaseModel):
    role: RoleType
    email: str
    password: str
    keep_me_signed_in: bool = False
    ip: Optional[str] = None
    user_agent: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class AuthorizedToken(BaseModel):
    """Token pair; expired_at is the access token expiry"""

    access: str
    refresh: str
    expired_at: datetime
    refreshable_until: datetime


class AuthorizedResponse(BaseModel):
    """Response for join, login and refresh"""

    id: UUID
    token: AuthorizedToken


class Principal(BaseModel):
    """Caller identity resolved by the authorization gate"""

    user_id: UUID
    email: str
    role: RoleType
    email_verified: bool
    session_id: Optional[UUID] = None


class LogoutResponse(BaseModel):
    session_id: Optional[UUID] = None
    revoked: bool
    message: str


class PasswordResetRequested(BaseModel):
    """
    Uniform acknowledgment for a reset request.

    Identical fields whether or not the email belongs to an account.
    """

    email: str
    requested_at: datetime
    expires_at: datetime
    note: str


class PasswordResetCompleted(BaseModel):
    status: str
    reset_at: datetime
    revoked_sessions_count: int
    message: str


class PasswordChanged(BaseModel):
    success: bool
    changed_at: datetime
    revoked_other_sessions: bool
    revoked_sessions_count: int
    message: str


class VerifyEmailResponse(BaseModel):
    """Response for email verification use case"""

    status: str
    email: str
    verified_at: datetime


class ResendVerificationResponse(BaseModel):
    """Uniform acknowledgment for resend verification"""

    email: str
    requested_at: datetime
    note: str
