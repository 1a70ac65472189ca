"""
Role and lifecycle policies.

Pure functions over entities; no data access. Shared by login, refresh and
the authorization gate so the three agree on what "live" means.
"""

from datetime import datetime
from typing import Dict, Optional

from src.domain.entities import (
    RefreshToken,
    RoleGrant,
    RoleType,
    Session,
    TokenState,
    User,
    UserStatus,
)

# Elevated roles must prove email ownership before they can act.
ROLE_REQUIRES_VERIFIED_EMAIL: Dict[RoleType, bool] = {
    RoleType.todo_user: False,
    RoleType.system_admin: True,
    RoleType.admin: True,
    RoleType.guest_visitor: False,
}

_missing_roles = set(RoleType) - set(ROLE_REQUIRES_VERIFIED_EMAIL)
if _missing_roles:
    raise RuntimeError(
        f"No email verification policy for roles: {sorted(r.value for r in _missing_roles)}"
    )


def requires_verified_email(role: RoleType) -> bool:
    return ROLE_REQUIRES_VERIFIED_EMAIL[role]


def is_user_usable(user: Optional[User]) -> bool:
    """User exists, is not soft-deleted and is active."""
    return (
        user is not None
        and user.deleted_at is None
        and user.status == UserStatus.active
    )


def is_role_grant_live(
    grant: Optional[RoleGrant], user: Optional[User], role: RoleType
) -> bool:
    """
    A grant is live only if it is itself unrevoked and undeleted AND its
    owning user is usable AND, for elevated roles, email-verified.
    """
    if grant is None or user is None:
        return False
    if grant.user_id != user.id or grant.role != role:
        return False
    if grant.revoked_at is not None or grant.deleted_at is not None:
        return False
    if not is_user_usable(user):
        return False
    if requires_verified_email(role) and not user.email_verified:
        return False
    return True


def is_session_active(session: Optional[Session], now: datetime) -> bool:
    return (
        session is not None
        and session.revoked_at is None
        and session.deleted_at is None
        and session.expires_at > now
    )


def refresh_token_state(token: RefreshToken, now: datetime) -> TokenState:
    """Terminal states win over expiry: a rotated token is reported as rotated."""
    if token.rotated_at is not None:
        return TokenState.rotated
    if token.revoked_at is not None or token.deleted_at is not None:
        return TokenState.revoked
    if token.expires_at <= now:
        return TokenState.expired
    return TokenState.active
