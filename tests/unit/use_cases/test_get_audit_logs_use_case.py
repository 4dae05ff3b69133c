from datetime import datetime

import pytest

from tillflow.app.use_cases.audit import GetAuditLogsUseCase
from tillflow.domain.entities import AuditAction, AuditLog, Role


@pytest.mark.asyncio
async def test_manager_reads_business_audit(mock_uow, make_user, signed_in):
    manager = signed_in(make_user(role=Role.manager))
    entry = AuditLog(
        business_id=manager.business_id,
        user_id=manager.id,
        user_name="Ama Mensah",
        user_role="MANAGER",
        action=AuditAction.login.value,
        created_at=datetime(2025, 6, 1, 8, 0, 0),
    )
    mock_uow.audit_logs.get_by_business_paginated.return_value = ([entry], "next")

    result = await GetAuditLogsUseCase(mock_uow).execute(manager, limit=10)

    assert result.is_ok()
    assert result.value["next_cursor"] == "next"
    assert result.value["entries"][0]["action"] == "LOGIN"
    assert result.value["entries"][0]["timestamp"] == "2025-06-01T08:00:00Z"
    mock_uow.audit_logs.get_by_business_paginated.assert_called_once_with(
        manager.business_id, limit=10, cursor=None
    )


@pytest.mark.asyncio
async def test_cashier_cannot_read_audit(mock_uow, make_user, signed_in):
    cashier = signed_in(make_user(role=Role.cashier))

    result = await GetAuditLogsUseCase(mock_uow).execute(cashier)

    assert result.error.code == "FORBIDDEN"
    mock_uow.audit_logs.get_by_business_paginated.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, 101])
async def test_limit_bounds(mock_uow, make_user, signed_in, limit):
    owner = signed_in(make_user(role=Role.owner))

    result = await GetAuditLogsUseCase(mock_uow).execute(owner, limit=limit)

    assert result.error.code == "INVALID_LIMIT"
