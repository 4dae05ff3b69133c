import pytest

from tillflow.app.services.passwords import verify_password
from tillflow.app.use_cases.users import (
    RevokeSessionsUseCase,
    UpdateAccountCommand,
    UpdateAccountUseCase,
)
from tillflow.domain.entities import AuditAction

from tests.unit.helpers import PASSWORD


@pytest.mark.asyncio
async def test_update_name_and_email(mock_uow, make_user, signed_in):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user

    result = await UpdateAccountUseCase(mock_uow).execute(
        signed_in(user),
        UpdateAccountCommand(
            name="Ama K. Mensah", email="AMA.K@shop.example", current_password=PASSWORD
        ),
    )

    assert result.is_ok()
    assert user.name == "Ama K. Mensah"
    assert user.email == "ama.k@shop.example"
    mock_uow.sessions.delete_all_except.assert_not_called()
    mock_uow.audit_logs.create.assert_not_called()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_password_change_revokes_other_sessions(mock_uow, make_user, signed_in):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.delete_all_except.return_value = 2
    current = signed_in(user)

    result = await UpdateAccountUseCase(mock_uow).execute(
        current,
        UpdateAccountCommand(
            name=user.name,
            email=user.email,
            current_password=PASSWORD,
            new_password="brand-new-pass",
        ),
        ip_address="10.0.0.9",
    )

    assert result.is_ok()
    assert verify_password("brand-new-pass", user.password_hash)
    mock_uow.sessions.delete_all_except.assert_called_once_with(user.id, current.session_id)
    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.password_change.value
    assert entry.details == {"other_sessions_revoked": 2}


@pytest.mark.asyncio
async def test_wrong_current_password(mock_uow, make_user, signed_in):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user

    result = await UpdateAccountUseCase(mock_uow).execute(
        signed_in(user),
        UpdateAccountCommand(name="X", email=user.email, current_password="nope"),
    )

    assert result.error.code == "WRONG_PASSWORD"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_email_taken_by_someone_else(mock_uow, make_user, signed_in):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    mock_uow.users.get_by_email.return_value = make_user(email="kofi@shop.example")

    result = await UpdateAccountUseCase(mock_uow).execute(
        signed_in(user),
        UpdateAccountCommand(
            name=user.name, email="kofi@shop.example", current_password=PASSWORD
        ),
    )

    assert result.error.code == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_new_password_too_short(mock_uow, make_user, signed_in):
    user = make_user()

    result = await UpdateAccountUseCase(mock_uow).execute(
        signed_in(user),
        UpdateAccountCommand(
            name=user.name, email=user.email, current_password=PASSWORD, new_password="123"
        ),
    )

    assert result.error.code == "WEAK_PASSWORD"


@pytest.mark.asyncio
async def test_revoke_other_sessions_keeps_current(mock_uow, make_user, signed_in):
    user = make_user()
    current = signed_in(user)
    mock_uow.sessions.delete_all_except.return_value = 3

    result = await RevokeSessionsUseCase(mock_uow).revoke_other_sessions(current)

    assert result.value.revoked_count == 3
    mock_uow.sessions.delete_all_except.assert_called_once_with(user.id, current.session_id)
    mock_uow.commit.assert_called_once()
