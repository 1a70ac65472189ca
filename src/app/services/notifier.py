from abc import ABC, abstractmethod
from datetime import datetime


class INotifier(ABC):
    """
    Out-of-band delivery of single-use tokens.

    Called only after the owning transaction committed; raw tokens go here
    and nowhere else.
    """

    @abstractmethod
    async def send_password_reset(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        pass

    @abstractmethod
    async def send_email_verification(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        pass
