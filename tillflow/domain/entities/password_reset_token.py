"""
PasswordResetToken Entity

One-time link tokens for the forgot-password flow.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tillflow.domain.base import as_naive_utc, utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - single-use password reset link.

    Business Rules:
    - Expires one hour after it is issued
    - Only the SHA-256 digest of the emailed token is stored
    - Single-use: marked as used on completion
    - Issuing a new token marks the user's earlier unused tokens as used
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)

    def is_expired_at(self, now: datetime) -> bool:
        return as_naive_utc(self.expires_at) < as_naive_utc(now)
