from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import RoleGrant, RoleType


class IRoleGrantRepository(ABC):
    """RoleGrant repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_role(
        self, user_id: UUID, role: RoleType
    ) -> Optional[RoleGrant]:
        """Get the grant of one role for a user, revoked or not"""
        pass

    @abstractmethod
    async def create(self, grant: RoleGrant) -> RoleGrant:
        """Create a new role grant"""
        pass

    @abstractmethod
    async def update(self, grant: RoleGrant) -> RoleGrant:
        """Update existing role grant"""
        pass
