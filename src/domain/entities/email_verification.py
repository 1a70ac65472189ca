"""
EmailVerification Entity

Single-use email verification tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class EmailVerification(SQLModel, table=True):
    """
    EmailVerification entity - proves ownership of target_email.

    Business Rules:
    - Token is SHA-256 hash of secure random string
    - Expires after 24 hours by default
    - Single-use; failed attempts against a known token bump failure_count
    """

    __tablename__ = "email_verifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    target_email: str = Field(max_length=255)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    sent_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))
    consumed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    failure_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
