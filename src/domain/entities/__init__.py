"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserStatus,
    RoleType,
    TokenState,
    RevokedBy,
)

# Export all entities
from .user import User
from .role_grant import RoleGrant
from .session import Session
from .refresh_token import RefreshToken
from .session_revocation import SessionRevocation
from .password_reset import PasswordReset
from .email_verification import EmailVerification
from .login_attempt import LoginAttempt
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserStatus",
    "RoleType",
    "TokenState",
    "RevokedBy",
    # Entities
    "User",
    "RoleGrant",
    "Session",
    "RefreshToken",
    "SessionRevocation",
    "PasswordReset",
    "EmailVerification",
    "LoginAttempt",
    "AuditEvent",
]
