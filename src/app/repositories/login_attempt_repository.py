from abc import ABC, abstractmethod

from src.domain.entities import LoginAttempt


class ILoginAttemptRepository(ABC):
    """LoginAttempt repository interface - application layer"""

    @abstractmethod
    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        """Record a login attempt (append-only)"""
        pass
