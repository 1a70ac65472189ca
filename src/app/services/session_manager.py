"""
Session Manager

Creates, lists and revokes sessions. Every method runs inside the caller's
unit of work and leaves committing to the caller, so a revocation can share
a transaction with whatever caused it (password reset, password change).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RevokedBy, RoleType, Session

logger = logging.getLogger(__name__)


@dataclass
class ClientContext:
    ip: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class RevocationSummary:
    revoked_session_ids: List[UUID] = field(default_factory=list)
    revoked_refresh_tokens_count: int = 0

    @property
    def revoked_sessions_count(self) -> int:
        return len(self.revoked_session_ids)


@dataclass
class SessionFilter:
    """
    Narrows a bulk revocation. Unset fields match everything; user_agent
    matches as a substring, the timestamps as strict upper bounds.
    """

    ip: Optional[str] = None
    user_agent: Optional[str] = None
    issued_before: Optional[datetime] = None
    expires_before: Optional[datetime] = None

    def matches(self, session: Session) -> bool:
        if self.ip is not None and session.ip != self.ip:
            return False
        if self.user_agent is not None and self.user_agent not in (session.user_agent or ""):
            return False
        if self.issued_before is not None and not session.issued_at < self.issued_before:
            return False
        if self.expires_before is not None and not session.expires_at < self.expires_before:
            return False
        return True


class SessionManager:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create_session(
        self,
        user_id: UUID,
        role: RoleType,
        client: Optional[ClientContext],
        expires_at: datetime,
        now: datetime,
    ) -> Session:
        client = client or ClientContext()
        session = Session(
            user_id=user_id,
            role=role,
            ip=client.ip,
            user_agent=client.user_agent,
            issued_at=now,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        return await self.uow.sessions.create(session)

    async def find_active_sessions(self, user_id: UUID, now: datetime) -> List[Session]:
        """Active sessions, oldest issued first"""
        return await self.uow.sessions.get_active_by_user_id(user_id, now)

    async def revoke(
        self,
        session_id: UUID,
        reason: str,
        revoked_by: RevokedBy,
        now: datetime,
        owner_id: Optional[UUID] = None,
    ) -> bool:
        """
        Revoke one session and its refresh tokens.

        Returns False without touching anything when the session is unknown,
        already revoked, or (with owner_id) belongs to someone else. Callers
        treat all of those as success.
        """
        session = await self.uow.sessions.get_by_id(session_id)
        if session is None:
            return False
        if owner_id is not None and session.user_id != owner_id:
            return False
        if session.revoked_at is not None:
            return False

        changed = await self.uow.sessions.revoke_if_active(session_id, reason, now)
        if not changed:
            return False

        await self.uow.refresh_tokens.revoke_by_session_ids([session_id], reason, now)
        await self.uow.session_revocations.upsert(session_id, now, revoked_by, reason)
        return True

    async def revoke_others(
        self,
        user_id: UUID,
        revoke_current: bool,
        reason: str,
        now: datetime,
        current_session_id: Optional[UUID] = None,
        revoked_by: RevokedBy = RevokedBy.user,
        session_filter: Optional[SessionFilter] = None,
    ) -> RevocationSummary:
        """
        Revoke a user's active sessions, optionally keeping one.

        The active list is read once; a session created after that read is
        not revoked by this call. When keeping one session, the caller's own
        session wins if it is still active, otherwise the oldest-issued one.
        The kept session is chosen from all active sessions, before
        session_filter narrows the rest.
        """
        active = await self.find_active_sessions(user_id, now)

        targets = list(active)
        if not revoke_current and targets:
            keep = next((s for s in targets if s.id == current_session_id), targets[0])
            targets = [s for s in targets if s.id != keep.id]
        if session_filter is not None:
            targets = [s for s in targets if session_filter.matches(s)]

        summary = RevocationSummary()
        if not targets:
            return summary

        for session in targets:
            if await self.uow.sessions.revoke_if_active(session.id, reason, now):
                summary.revoked_session_ids.append(session.id)

        summary.revoked_refresh_tokens_count = (
            await self.uow.refresh_tokens.revoke_by_session_ids(
                summary.revoked_session_ids, reason, now
            )
        )
        for session_id in summary.revoked_session_ids:
            await self.uow.session_revocations.upsert(session_id, now, revoked_by, reason)

        logger.info(
            f"Revoked {summary.revoked_sessions_count} session(s) for user {user_id} "
            f"(reason={reason})"
        )
        return summary

    async def revoke_all(
        self, user_id: UUID, reason: str, revoked_by: RevokedBy, now: datetime
    ) -> RevocationSummary:
        return await self.revoke_others(
            user_id, True, reason, now, revoked_by=revoked_by
        )
