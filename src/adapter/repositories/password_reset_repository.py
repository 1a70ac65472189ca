from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.domain.entities import PasswordReset


class PasswordResetRepository(IPasswordResetRepository):
    """PasswordReset repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, reset: PasswordReset) -> PasswordReset:
        """Create a new password reset request"""
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get non-deleted password reset request by token hash"""
        stmt = select(PasswordReset).where(
            PasswordReset.token_hash == token_hash,
            PasswordReset.deleted_at.is_(None),
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, reset: PasswordReset) -> PasswordReset:
        """Update existing password reset request"""
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset
