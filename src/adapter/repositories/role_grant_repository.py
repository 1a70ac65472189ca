from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_grant_repository import IRoleGrantRepository
from src.domain.entities import RoleGrant, RoleType


class RoleGrantRepository(IRoleGrantRepository):
    """RoleGrant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_role(
        self, user_id: UUID, role: RoleType
    ) -> Optional[RoleGrant]:
        """Get the grant of one role for a user"""
        stmt = select(RoleGrant).where(
            RoleGrant.user_id == user_id, RoleGrant.role == role
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, grant: RoleGrant) -> RoleGrant:
        """Create a new role grant"""
        self.session.add(grant)
        await self.session.flush()
        await self.session.refresh(grant)
        return grant

    async def update(self, grant: RoleGrant) -> RoleGrant:
        """Update existing role grant"""
        self.session.add(grant)
        await self.session.flush()
        await self.session.refresh(grant)
        return grant
