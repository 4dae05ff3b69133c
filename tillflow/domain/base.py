import hashlib
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store"""
    return datetime.now(UTC).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def hash_token(token: str) -> str:
    """SHA-256 digest stored in place of a raw session token"""
    return hashlib.sha256(token.encode()).hexdigest()
