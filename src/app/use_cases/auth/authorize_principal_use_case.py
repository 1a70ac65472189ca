"""
Authorize Principal Use Case

Re-validates an access token's subject against live state on every
protected call.
"""

from libs.result import Error, Result, Return
from src.app.services.token_issuer import AccessTokenClaims
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import RoleType
from src.domain.policies import is_role_grant_live, is_session_active
from .dtos import Principal


class AuthorizePrincipalUseCase:
    """
    Use case behind the authorization gate.

    Business Rules:
    - Token role must match the route role (FORBIDDEN)
    - Role grant must be live right now: not revoked/deleted, user active and
      not deleted, email verified where the role requires it (FORBIDDEN)
    - A token bound to a session is only honoured while that session is
      active (UNAUTHORIZED)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, claims: AccessTokenClaims, role: RoleType) -> Result[Principal]:
        if claims.type != role:
            return Return.err(Error("FORBIDDEN", "Token is not valid for this role"))

        async with self.uow:
            now = utc_now()
            user = await self.uow.users.get_by_id(claims.id)
            grant = await self.uow.role_grants.get_by_user_and_role(claims.id, role)
            if not is_role_grant_live(grant, user, role):
                return Return.err(Error("FORBIDDEN", "Role is not active"))

            if claims.sid is not None:
                session = await self.uow.sessions.get_by_id(claims.sid)
                if not is_session_active(session, now) or session.user_id != user.id:
                    return Return.err(Error("UNAUTHORIZED", "Session is no longer active"))

            return Return.ok(
                Principal(
                    user_id=user.id,
                    email=user.email,
                    role=role,
                    email_verified=user.email_verified,
                    session_id=claims.sid,
                )
            )
