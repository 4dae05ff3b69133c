from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from tillflow.app.use_cases.auth import LogoutUseCase, RequestContext
from tillflow.domain.base import hash_token
from tillflow.domain.entities import AuditAction, Session

TOKEN = "b" * 64


@pytest.mark.asyncio
async def test_logout_deletes_session_and_audits(mock_uow, make_user):
    user = make_user()
    session = Session(
        id=uuid4(),
        token_hash=hash_token(TOKEN),
        user_id=user.id,
        expires_at=datetime(2030, 1, 1) + timedelta(days=1),
    )
    mock_uow.sessions.get_with_user_by_token_hash.return_value = (session, user)

    result = await LogoutUseCase(mock_uow).execute(
        RequestContext(session_token=TOKEN, ip_address="10.0.0.1")
    )

    assert result.is_ok()
    mock_uow.sessions.delete_by_token_hash.assert_called_once_with(hash_token(TOKEN))
    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.logout.value
    assert entry.entity_id == str(session.id)
    assert entry.ip_address == "10.0.0.1"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_unknown_token_still_succeeds(mock_uow):
    result = await LogoutUseCase(mock_uow).execute(RequestContext(session_token=TOKEN))

    assert result.is_ok()
    mock_uow.audit_logs.create.assert_not_called()


@pytest.mark.asyncio
async def test_logout_without_cookie_touches_nothing(mock_uow):
    result = await LogoutUseCase(mock_uow).execute(RequestContext())

    assert result.is_ok()
    assert result.value.status == "signed_out"
    mock_uow.sessions.delete_by_token_hash.assert_not_called()
