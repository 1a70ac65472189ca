from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_revocation_repository import (
    ISessionRevocationRepository,
)
from src.domain.entities import RevokedBy, SessionRevocation


class SessionRevocationRepository(ISessionRevocationRepository):
    """SessionRevocation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_session_id(self, session_id: UUID) -> Optional[SessionRevocation]:
        """Get the revocation record of a session"""
        stmt = select(SessionRevocation).where(
            SessionRevocation.session_id == session_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def upsert(
        self,
        session_id: UUID,
        revoked_at: datetime,
        revoked_by: RevokedBy,
        reason: str,
    ) -> SessionRevocation:
        """Create the record, or refresh it when the session already has one"""
        record = await self.get_by_session_id(session_id)
        if record is None:
            record = SessionRevocation(
                session_id=session_id,
                revoked_at=revoked_at,
                revoked_by=revoked_by,
                reason=reason,
                created_at=revoked_at,
                updated_at=revoked_at,
            )
        else:
            record.revoked_at = revoked_at
            record.revoked_by = revoked_by
            record.reason = reason
            record.updated_at = revoked_at

        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record
