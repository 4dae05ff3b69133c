from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from tillflow.domain.entities import AuditLog


class IAuditLogRepository(ABC):
    """AuditLog repository interface (audit store) - application layer"""

    @abstractmethod
    async def create(self, audit_log: AuditLog) -> AuditLog:
        """Append an audit entry"""
        pass

    @abstractmethod
    async def delete_older_than(self, business_id: UUID, cutoff: datetime) -> int:
        """Delete entries of one business created strictly before cutoff. Returns count."""
        pass

    @abstractmethod
    async def get_by_business_paginated(
        self, business_id: UUID, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[AuditLog], Optional[str]]:
        """
        Get audit entries for a business with cursor-based pagination.

        Returns:
            Tuple of (entries list, next_cursor)
            - entries: ordered by created_at DESC
            - next_cursor: Cursor for next page, None if no more entries
        """
        pass
