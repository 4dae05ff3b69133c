from datetime import datetime, timedelta

import pytest

from tillflow.app.services.passwords import verify_password
from tillflow.app.use_cases.auth import RegisterCommand, RegisterUseCase
from tillflow.domain.entities import AuditAction, Role

NOW = datetime(2025, 6, 1, 8, 0, 0)


def _command(**overrides):
    fields = dict(
        business_name="Mensah Provisions",
        owner_name="Ama Mensah",
        email=" Ama@Shop.Example ",
        password="secret1",
        currency="ghs",
    )
    fields.update(overrides)
    return RegisterCommand(**fields)


@pytest.mark.asyncio
async def test_register_creates_business_owner_and_session(mock_uow):
    use_case = RegisterUseCase(mock_uow, session_ttl_days=7, clock=lambda: NOW)

    result = await use_case.execute(_command())

    assert result.is_ok()
    issued = result.value
    assert issued.user.role == "OWNER"
    assert issued.user.email == "ama@shop.example"
    assert issued.expires_at == NOW + timedelta(days=7)

    business = mock_uow.businesses.create.call_args.args[0]
    assert business.name == "Mensah Provisions"
    assert business.currency == "GHS"

    owner = mock_uow.users.create.call_args.args[0]
    assert owner.role == Role.owner
    assert owner.business_id == business.id
    assert verify_password("secret1", owner.password_hash)

    entry = mock_uow.audit_logs.create.call_args.args[0]
    assert entry.action == AuditAction.user_create.value
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_register_duplicate_email(mock_uow, make_user):
    mock_uow.users.get_by_email.return_value = make_user()

    result = await RegisterUseCase(mock_uow).execute(_command())

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.businesses.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_register_weak_password(mock_uow):
    result = await RegisterUseCase(mock_uow).execute(_command(password="12345"))

    assert result.error.code == "WEAK_PASSWORD"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["business_name", "owner_name", "email", "password"])
async def test_register_missing_field(mock_uow, field):
    blank = "" if field == "password" else "  "

    result = await RegisterUseCase(mock_uow).execute(_command(**{field: blank}))

    assert result.error.code == "MISSING_FIELDS"
