from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import PasswordReset


class IPasswordResetRepository(ABC):
    """PasswordReset repository interface - application layer"""

    @abstractmethod
    async def create(self, reset: PasswordReset) -> PasswordReset:
        """Create a new password reset request"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get password reset request by token hash"""
        pass

    @abstractmethod
    async def update(self, reset: PasswordReset) -> PasswordReset:
        """Update existing password reset request"""
        pass
