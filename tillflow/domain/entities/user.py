"""
User Entity

A staff member of a business who can sign in to the till.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tillflow.domain.base import utcnow
from .enums import Role


class User(SQLModel, table=True):
    """
    User entity - a staff account belonging to exactly one business.

    Business Rules:
    - Email is unique across all users and stored lowercase
    - Password stored as bcrypt hash
    - Never hard-deleted; deactivated with active=False
    - approval_pin_hash is a bcrypt hash of a 4-8 digit PIN; only active
      MANAGER and OWNER PINs approve anything
    - two_factor_temp_secret holds a pending enrollment until confirmed,
      then moves to two_factor_secret
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    business_id: UUID = Field(foreign_key="businesses.id", nullable=False, index=True)

    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    approval_pin_hash: Optional[str] = Field(default=None, max_length=60)

    role: Role = Field(default=Role.cashier)
    active: bool = Field(default=True)

    # Two-factor authentication
    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_temp_secret: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_business_role", "business_id", "role"),)
