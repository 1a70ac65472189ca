"""
User Entity

Represents a principal that can hold one or more role grants.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now
from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - a principal identified by email.

    Business Rules:
    - Email must be unique across all users
    - Password stored as bcrypt hash
    - Soft delete only: deleted_at hides the user from every lookup
    - Role grants are live only while the user is active and not deleted
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: UserStatus = Field(default=UserStatus.active)

    email_verified: bool = Field(default=False)
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_email_verified", "email_verified"),
        Index("idx_user_deleted_at", "deleted_at"),
    )
