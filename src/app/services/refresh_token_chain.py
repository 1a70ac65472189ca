"""
Refresh Token Chain

Single-use rotating refresh tokens. Each session owns one chain: a root
token issued at login and one child per successful refresh, linked through
parent_id. Rotated rows are kept so that replaying them keeps failing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RefreshToken, Session, TokenState
from src.domain.policies import refresh_token_state


@dataclass
class IssuedRefreshToken:
    token: RefreshToken
    secret: str


class RefreshTokenChain:
    def __init__(self, uow: UnitOfWork, token_issuer: ITokenIssuer):
        self.uow = uow
        self.token_issuer = token_issuer

    async def issue_root(self, session: Session, now: datetime) -> IssuedRefreshToken:
        return await self._issue(session, None, now)

    async def find_by_secret(self, secret: str) -> Optional[RefreshToken]:
        token_hash = self.token_issuer.hash_secret(secret)
        return await self.uow.refresh_tokens.get_by_token_hash(token_hash)

    def state_of(self, token: RefreshToken, now: datetime) -> TokenState:
        return refresh_token_state(token, now)

    async def rotate(
        self, parent: RefreshToken, session: Session, now: datetime
    ) -> Optional[IssuedRefreshToken]:
        """
        Mark parent rotated and insert its child.

        None means another caller rotated (or revoked) the parent first; in
        that case nothing was written.
        """
        if not await self.uow.refresh_tokens.mark_rotated(parent.id, now):
            return None
        return await self._issue(session, parent.id, now)

    async def _issue(
        self, session: Session, parent_id: Optional[UUID], now: datetime
    ) -> IssuedRefreshToken:
        secret = self.token_issuer.issue_refresh_secret()
        # A token never outlives its session
        expires_at = min(now + self.token_issuer.refresh_ttl, session.expires_at)
        if parent_id is None:
            expires_at = session.expires_at

        token = RefreshToken(
            session_id=session.id,
            parent_id=parent_id,
            token_hash=self.token_issuer.hash_secret(secret),
            issued_at=now,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        token = await self.uow.refresh_tokens.create(token)
        return IssuedRefreshToken(token=token, secret=secret)
