"""
Business Entity

The organisation that owns staff accounts and audit history.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from tillflow.domain.base import utcnow


class Business(SQLModel, table=True):
    """
    Business entity - the tenant boundary for users and audit logs.

    Business Rules:
    - Created together with its first OWNER at registration
    - Audit log retention is enforced per business
    """

    __tablename__ = "businesses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    currency: str = Field(default="GHS", max_length=8)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
