"""
LoginAttempt Entity

Append-only record of every login attempt.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now
from .enums import RoleType


class LoginAttempt(SQLModel, table=True):
    __tablename__ = "login_attempts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    email: str = Field(max_length=255)
    role: RoleType = Field(nullable=False)

    success: bool = Field(default=False)
    failure_reason: Optional[str] = Field(default=None, max_length=100)
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    occurred_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_login_attempt_email", "email"),)
