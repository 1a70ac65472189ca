"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    pending_verification = "pending_verification"
    suspended = "suspended"
    disabled = "disabled"


class RoleType(str, Enum):
    """
    Closed set of roles a principal can be granted.

    The value doubles as the ``type`` claim of access tokens and as the
    ``{role}`` segment of the /auth routes.
    """

    todo_user = "todoUser"
    system_admin = "systemAdmin"
    admin = "admin"
    guest_visitor = "guestVisitor"


class TokenState(str, Enum):
    """Lifecycle state of a refresh token. Every state but active is terminal."""

    active = "active"
    rotated = "rotated"
    revoked = "revoked"
    expired = "expired"


class RevokedBy(str, Enum):
    """Who initiated a session revocation"""

    user = "user"
    system = "system"
