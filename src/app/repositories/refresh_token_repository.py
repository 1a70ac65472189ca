from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get refresh token by the SHA-256 hash of its secret"""
        pass

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        pass

    @abstractmethod
    async def mark_rotated(self, token_id: UUID, now: datetime) -> bool:
        """
        Compare-and-set rotated_at from null to now.
        Returns False when the token was already rotated or revoked.
        """
        pass

    @abstractmethod
    async def revoke_by_session_ids(
        self, session_ids: List[UUID], reason: str, now: datetime
    ) -> int:
        """Revoke every unrevoked token of the given sessions. Returns count."""
        pass
