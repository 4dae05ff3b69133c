"""
Get Audit Logs Use Case

Business-scoped audit trail, newest first, with cursor pagination.
"""

from typing import Any, Dict, Optional

from libs.result import Error, Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import Role

MAX_PAGE_SIZE = 100

AUDIT_VIEWER_ROLES = frozenset({Role.manager, Role.owner})


class GetAuditLogsUseCase:
    """
    Use case for reading the audit log of the caller's business.

    Business Rules:
    - Caller must be MANAGER or OWNER
    - Results are business-scoped and ordered newest first
    - limit must be between 1 and 100
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        current: AuthenticatedUser,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        if current.role not in AUDIT_VIEWER_ROLES:
            return Return.err(
                Error("FORBIDDEN", "You do not have permission to view the audit log")
            )
        if limit < 1 or limit > MAX_PAGE_SIZE:
            return Return.err(
                Error("INVALID_LIMIT", f"limit must be between 1 and {MAX_PAGE_SIZE}")
            )

        async with self.uow:
            entries, next_cursor = await self.uow.audit_logs.get_by_business_paginated(
                current.business_id, limit=limit, cursor=cursor
            )

            return Return.ok(
                {
                    "entries": [
                        {
                            "id": str(entry.id),
                            "action": entry.action,
                            "user_id": str(entry.user_id) if entry.user_id else None,
                            "user_name": entry.user_name,
                            "user_role": entry.user_role,
                            "entity": entry.entity,
                            "entity_id": entry.entity_id,
                            "details": entry.details or {},
                            "ip_address": entry.ip_address,
                            "timestamp": entry.created_at.isoformat() + "Z",
                        }
                        for entry in entries
                    ],
                    "next_cursor": next_cursor,
                }
            )
