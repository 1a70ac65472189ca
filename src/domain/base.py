import hashlib
import uuid
from datetime import UTC, datetime


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a stored (naive) timestamp for API responses."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest used as the lookup key for opaque tokens."""
    return hashlib.sha256(raw_token.encode()).hexdigest()


def to_naive_utc(value: datetime) -> datetime:
    """Inverse of as_utc: bring a client-supplied timestamp into stored form."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
