"""
AuditLog Entity

Business-scoped trail of security-relevant actions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from tillflow.domain.base import utcnow


class AuditLog(SQLModel, table=True):
    """
    AuditLog entity - append-only record of who did what.

    Business Rules:
    - Never updated
    - Entries older than the retention window are deleted by the
      maintenance sweep, one business at a time
    - user_name/user_role are copied so entries survive user changes
    """

    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    business_id: UUID = Field(nullable=False, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)
    user_name: str = Field(default="Unknown", max_length=255)
    user_role: str = Field(max_length=16)

    action: str = Field(max_length=50)
    entity: Optional[str] = Field(default=None, max_length=50)
    entity_id: Optional[str] = Field(default=None, max_length=64)
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    ip_address: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_business_created_at", "business_id", "created_at"),
    )
