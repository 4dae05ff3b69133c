"""
Audit API Routes

Handles audit log retrieval endpoints.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.session_auth import require_role
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.audit import GetAuditLogsUseCase
from tillflow.app.use_cases.auth import AuthenticatedUser
from tillflow.depends import get_unit_of_work
from tillflow.domain.entities import Role

router = APIRouter(prefix="/audit", tags=["Audit"])


class AuditEntryResponse(BaseModel):
    """Single audit entry in response"""

    id: str
    action: str
    user_id: Optional[str]
    user_name: str
    user_role: str
    entity: Optional[str]
    entity_id: Optional[str]
    details: Dict[str, Any]
    ip_address: Optional[str]
    timestamp: str


class AuditLogsResponse(BaseModel):
    """GET /audit/logs response payload"""

    entries: List[AuditEntryResponse]
    next_cursor: Optional[str]


@router.get("/logs", status_code=status.HTTP_200_OK, response_model=AuditLogsResponse)
async def get_audit_logs(
    current_user: AuthenticatedUser = Depends(require_role(Role.manager, Role.owner)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of entries to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Audit Log

    Returns the business's audit entries, newest first.
    Only accessible by managers and owners.

    Query Parameters:
        - limit: Maximum number of entries to return (1-100, default 50)
        - cursor: Pagination cursor for fetching next page

    Raises:
        - 401 Unauthorized: No valid session
        - 403 Forbidden: Cashiers
    """
    use_case = GetAuditLogsUseCase(uow)
    result = await use_case.execute(current_user, limit=limit, cursor=cursor)

    if result.is_err():
        error = result.error
        if error.code == "FORBIDDEN":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        if error.code == "INVALID_LIMIT":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
