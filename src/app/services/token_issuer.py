from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import RoleType


class AccessTokenClaims(BaseModel):
    """Verified claims of an access token"""

    id: UUID
    type: RoleType
    sid: Optional[UUID] = None
    iss: str
    iat: int
    exp: int


class IssuedAccessToken(BaseModel):
    token: str
    expires_at: datetime


class ITokenIssuer(ABC):
    """
    Token issuer interface - application layer.

    Access tokens are signed and short-lived. Refresh secrets are opaque
    random strings; the server-side row is the only source of truth for them.
    """

    access_ttl: timedelta
    refresh_ttl: timedelta
    extended_refresh_ttl: timedelta

    @abstractmethod
    def issue_access_token(
        self,
        subject_id: UUID,
        role: RoleType,
        session_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> IssuedAccessToken:
        """Mint a signed access token carrying {id, type, sid}"""
        pass

    @abstractmethod
    def decode_access_token(self, token: str) -> Optional[AccessTokenClaims]:
        """Verify signature, expiry and issuer. None on any failure."""
        pass

    @abstractmethod
    def issue_refresh_secret(self) -> str:
        pass

    @abstractmethod
    def hash_secret(self, secret: str) -> str:
        pass
