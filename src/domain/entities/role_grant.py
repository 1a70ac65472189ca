"""
RoleGrant Entity

Grants one role to a user.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now
from .enums import RoleType


class RoleGrant(SQLModel, table=True):
    """
    RoleGrant entity - one role held by one user.

    Business Rules:
    - (user_id, role) must be unique
    - revoked_at/deleted_at are independent of the user's own soft delete
    - Checked on every protected call, so revocation takes effect immediately
    """

    __tablename__ = "role_grants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role: RoleType = Field(nullable=False)

    granted_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_role_grant_user_role", "user_id", "role", unique=True),
    )
