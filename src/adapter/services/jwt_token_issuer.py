import logging
import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from pydantic import ValidationError

from src.app.services.token_issuer import (
    AccessTokenClaims,
    ITokenIssuer,
    IssuedAccessToken,
)
from src.domain.base import as_utc, hash_token, utc_now
from src.domain.entities import RoleType

logger = logging.getLogger(__name__)


class JoseTokenIssuer(ITokenIssuer):
    """HS256 access tokens signed with python-jose"""

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=7),
        extended_refresh_ttl: timedelta = timedelta(days=30),
    ):
        self.secret_key = secret_key
        self.issuer = issuer
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.extended_refresh_ttl = extended_refresh_ttl

    @classmethod
    def from_config(cls, config) -> "JoseTokenIssuer":
        return cls(
            secret_key=config.JWT_SECRET,
            issuer=config.JWT_ISSUER,
            algorithm=config.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES),
            refresh_ttl=timedelta(days=config.REFRESH_TOKEN_TTL_DAYS),
            extended_refresh_ttl=timedelta(days=config.REFRESH_TOKEN_EXTENDED_TTL_DAYS),
        )

    def issue_access_token(self, subject_id, role, session_id=None, now=None):
        issued_at = as_utc(now or utc_now())
        expires_at = issued_at + self.access_ttl
        payload = {
            "id": str(subject_id),
            "type": RoleType(role).value,
            "iss": self.issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            # jti keeps two tokens minted in the same second distinct
            "jti": secrets.token_hex(8),
        }
        if session_id is not None:
            payload["sid"] = str(session_id)

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return IssuedAccessToken(token=token, expires_at=expires_at.replace(tzinfo=None))

    def decode_access_token(self, token: str) -> Optional[AccessTokenClaims]:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
            return AccessTokenClaims(**payload)
        except JWTError as e:
            logger.debug(f"Rejected access token: {e}")
            return None
        except ValidationError:
            logger.debug("Rejected access token: malformed claims")
            return None

    def issue_refresh_secret(self) -> str:
        return secrets.token_urlsafe(48)

    def hash_secret(self, secret: str) -> str:
        return hash_token(secret)
