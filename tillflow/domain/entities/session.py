"""
Session Entity

Server-side record of a successful login, referenced by an opaque cookie token.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tillflow.domain.base import as_naive_utc, utcnow


class Session(SQLModel, table=True):
    """
    Session entity - one row per signed-in device.

    Business Rules:
    - Only the SHA-256 digest of the token is stored
    - Valid iff the row exists and expires_at is strictly in the future
    - Expired rows linger until logout or the maintenance sweep removes them
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)

    def is_valid_at(self, now: datetime) -> bool:
        return as_naive_utc(self.expires_at) > as_naive_utc(now)
