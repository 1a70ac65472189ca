"""
SessionRevocation Entity

Audit row for a revoked session, one per session.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now
from .enums import RevokedBy


class SessionRevocation(SQLModel, table=True):
    """
    SessionRevocation entity - who revoked a session, when and why.

    Business Rules:
    - Keyed 1:1 by session_id, written as an upsert
    - Repeated revocations refresh the row instead of duplicating it
    """

    __tablename__ = "session_revocations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    session_id: UUID = Field(foreign_key="sessions.id", unique=True, index=True)

    revoked_at: datetime = Field(sa_column=Column(DateTime))
    revoked_by: RevokedBy = Field(default=RevokedBy.user)
    reason: str = Field(max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
