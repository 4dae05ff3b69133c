from uuid import uuid4

import pytest

from tillflow.app.services.approval_pin import (
    InvalidPinError,
    hash_approval_pin,
    sanitize_pin,
    validate_pin,
    verify_manager_pin,
)
from tillflow.app.services.passwords import verify_password
from tillflow.domain.entities import Role

from tests.unit.helpers import APPROVAL_PIN, APPROVAL_PIN_HASH


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12 34", "1234"),
        ("1-2-3-4", "1234"),
        ("abc1234def", "1234"),
        ("abcdef", ""),
        ("", ""),
        ("5678", "5678"),
    ],
)
def test_sanitize_pin_keeps_digits_only(raw, expected):
    assert sanitize_pin(raw) == expected


@pytest.mark.parametrize("pin", ["1234", "12345678", "123 456"])
def test_validate_pin_accepts_four_to_eight_digits(pin):
    assert validate_pin(pin) == sanitize_pin(pin)


@pytest.mark.parametrize("pin", ["123", "123456789", "abcd", ""])
def test_validate_pin_rejects_bad_lengths(pin):
    with pytest.raises(InvalidPinError, match="4 to 8 digits"):
        validate_pin(pin)


def test_hash_approval_pin_hashes_sanitized_pin():
    pin_hash = hash_approval_pin("48-21")

    assert pin_hash != "4821"
    assert verify_password("4821", pin_hash)


@pytest.mark.asyncio
async def test_verify_manager_pin_returns_matching_approver(mock_uow, make_user):
    business_id = uuid4()
    other = make_user(business_id=business_id, role=Role.manager, approval_pin_hash="x" * 60)
    manager = make_user(
        business_id=business_id, role=Role.manager, approval_pin_hash=APPROVAL_PIN_HASH
    )
    mock_uow.users.list_pin_approvers.return_value = [other, manager]

    approver = await verify_manager_pin(mock_uow, business_id, f" {APPROVAL_PIN} ")

    assert approver is manager
    mock_uow.users.list_pin_approvers.assert_called_once_with(business_id)


@pytest.mark.asyncio
async def test_verify_manager_pin_no_match(mock_uow, make_user):
    mock_uow.users.list_pin_approvers.return_value = [
        make_user(role=Role.owner, approval_pin_hash=APPROVAL_PIN_HASH)
    ]

    assert await verify_manager_pin(mock_uow, uuid4(), "0000") is None


@pytest.mark.asyncio
async def test_verify_manager_pin_empty_pin_skips_lookup(mock_uow):
    assert await verify_manager_pin(mock_uow, uuid4(), "no digits") is None
    mock_uow.users.list_pin_approvers.assert_not_called()
