import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.app.repositories.audit_log_repository import IAuditLogRepository
from tillflow.domain.entities import AuditLog


class AuditLogRepository(IAuditLogRepository):
    """AuditLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_log: AuditLog) -> AuditLog:
        self.session.add(audit_log)
        await self.session.flush()
        await self.session.refresh(audit_log)
        return audit_log

    async def delete_older_than(self, business_id: UUID, cutoff: datetime) -> int:
        stmt = delete(AuditLog).where(
            AuditLog.business_id == business_id,
            AuditLog.created_at < cutoff,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def get_by_business_paginated(
        self, business_id: UUID, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[AuditLog], Optional[str]]:
        """
        Get audit entries for a business with cursor-based pagination.

        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = select(AuditLog).where(AuditLog.business_id == business_id)

        if cursor:
            try:
                cursor_timestamp_str = base64.b64decode(cursor).decode("utf-8")
                cursor_timestamp = datetime.fromisoformat(cursor_timestamp_str)
                stmt = stmt.where(AuditLog.created_at < cursor_timestamp)
            except (ValueError, TypeError):
                # Invalid cursor, start from the newest entry
                pass

        stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit + 1)

        result = await self.session.exec(stmt)
        entries = list(result.all())

        has_more = len(entries) > limit
        if has_more:
            entries = entries[:limit]

        next_cursor = None
        if has_more and entries:
            cursor_timestamp_str = entries[-1].created_at.isoformat()
            next_cursor = base64.b64encode(cursor_timestamp_str.encode("utf-8")).decode("utf-8")

        return entries, next_cursor
