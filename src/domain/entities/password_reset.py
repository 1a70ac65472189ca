"""
PasswordReset Entity

Single-use password reset requests.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class PasswordReset(SQLModel, table=True):
    """
    PasswordReset entity - secure password reset requests.

    Business Rules:
    - Stored for every request, even when the email matches no user
      (user_id is null then), so existence is never revealed
    - Token is SHA-256 hash of secure random string
    - Expires after a short TTL (1 hour by default)
    - Single-use: consumed_at is set once and never cleared
    """

    __tablename__ = "password_resets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)
    email: str = Field(max_length=255, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    requested_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    consumed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    failure_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)
