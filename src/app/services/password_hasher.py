from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """Credential store primitive: one-way hash and verification"""

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        pass

    @abstractmethod
    def dummy_verify(self, password: str) -> None:
        """Spend the same work as verify() when there is no hash to check"""
        pass
