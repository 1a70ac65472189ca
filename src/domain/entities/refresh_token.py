"""
RefreshToken Entity

Single-use rotating refresh tokens chained to a session.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - one link of a session's refresh chain.

    Business Rules:
    - Only the SHA-256 hash of the opaque secret is stored (unique lookup key)
    - Root token has parent_id = null, every rotation inserts a child
    - rotated_at is set exactly once; a rotated row stays so replays fail
    - Usable only while not rotated, not revoked, not expired, session active
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    session_id: UUID = Field(foreign_key="sessions.id", nullable=False, index=True)
    parent_id: Optional[UUID] = Field(default=None, foreign_key="refresh_tokens.id")

    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hash

    issued_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    rotated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_reason: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_parent_id", "parent_id"),
    )
