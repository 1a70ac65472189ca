from datetime import datetime
from typing import Optional

from src.app.services.refresh_token_chain import RefreshTokenChain
from src.app.services.session_manager import ClientContext, SessionManager
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc
from src.domain.entities import RoleType, User
from .dtos import AuthorizedResponse, AuthorizedToken


async def open_authorized_session(
    uow: UnitOfWork,
    token_issuer: ITokenIssuer,
    user: User,
    role: RoleType,
    keep_me_signed_in: bool,
    now: datetime,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuthorizedResponse:
    """
    Start a session for an authenticated user: session row, root refresh
    token and access token. Runs inside the caller's unit of work.
    """
    refresh_ttl = (
        token_issuer.extended_refresh_ttl if keep_me_signed_in else token_issuer.refresh_ttl
    )

    session = await SessionManager(uow).create_session(
        user.id,
        role,
        ClientContext(ip=ip, user_agent=user_agent),
        expires_at=now + refresh_ttl,
        now=now,
    )
    refresh = await RefreshTokenChain(uow, token_issuer).issue_root(session, now)
    access = token_issuer.issue_access_token(user.id, role, session.id, now=now)

    return AuthorizedResponse(
        id=user.id,
        token=AuthorizedToken(
            access=access.token,
            refresh=refresh.secret,
            expired_at=as_utc(access.expires_at),
            refreshable_until=as_utc(refresh.token.expires_at),
        ),
    )
