"""
Refresh Token Use Case

Exchanges a refresh token for a new access token and a new refresh token.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.refresh_token_chain import RefreshTokenChain
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, utc_now
from src.domain.entities import AuditEvent, RoleType, TokenState
from src.domain.policies import is_role_grant_live, is_session_active
from .dtos import AuthorizedResponse, AuthorizedToken

logger = logging.getLogger(__name__)

INVALID_TOKEN = Error("INVALID_TOKEN", "Invalid refresh token")


class RefreshTokenUseCase:
    """
    Use case for refresh token rotation.

    Business Rules:
    - Refresh tokens are single-use: the presented token is marked rotated
      and a child token is issued in the same transaction
    - Unknown, rotated, revoked or expired tokens fail with INVALID_TOKEN,
      as do revoked/expired sessions and sessions opened for another role
    - The role grant is re-checked; a dead grant fails with ROLE_NOT_ACTIVE
    - Of two concurrent refreshes with one token, at most one succeeds
    """

    def __init__(self, uow: UnitOfWork, token_issuer: ITokenIssuer):
        self.uow = uow
        self.token_issuer = token_issuer

    async def execute(self, role: RoleType, refresh_token: str) -> Result[AuthorizedResponse]:
        """
        Execute refresh token use case.

        Args:
            role: Role the caller is refreshing for
            refresh_token: The opaque refresh secret to rotate

        Returns:
            Result with AuthorizedResponse containing the new token pair, or Error
        """
        async with self.uow:
            now = utc_now()
            chain = RefreshTokenChain(self.uow, self.token_issuer)

            token = await chain.find_by_secret(refresh_token)
            if token is None:
                return Return.err(INVALID_TOKEN)

            state = chain.state_of(token, now)
            if state != TokenState.active:
                if state == TokenState.rotated:
                    logger.warning(
                        f"Replay of rotated refresh token {token.id} "
                        f"(session {token.session_id})"
                    )
                return Return.err(INVALID_TOKEN)

            session = await self.uow.sessions.get_by_id(token.session_id)
            if not is_session_active(session, now) or session.role != role:
                return Return.err(INVALID_TOKEN)

            user = await self.uow.users.get_by_id(session.user_id)
            grant = await self.uow.role_grants.get_by_user_and_role(session.user_id, role)
            if not is_role_grant_live(grant, user, role):
                return Return.err(Error("ROLE_NOT_ACTIVE", "Role is not active"))

            child = await chain.rotate(token, session, now)
            if child is None:
                logger.warning(f"Lost rotation race for refresh token {token.id}")
                return Return.err(INVALID_TOKEN)

            session.updated_at = now
            await self.uow.sessions.update(session)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="token_refresh",
                    resource_type="sessions",
                    resource_id=session.id,
                    created_at=now,
                )
            )

            user_id = user.id
            session_id = session.id
            refreshable_until = child.token.expires_at

            await self.uow.commit()

        access = self.token_issuer.issue_access_token(user_id, role, session_id, now=now)

        return Return.ok(
            AuthorizedResponse(
                id=user_id,
                token=AuthorizedToken(
                    access=access.token,
                    refresh=child.secret,
                    expired_at=as_utc(access.expires_at),
                    refreshable_until=as_utc(refreshable_until),
                ),
            )
        )
