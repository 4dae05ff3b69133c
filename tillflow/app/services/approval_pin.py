"""
Approval PIN

Short numeric PINs a manager or owner types at the till to approve a
restricted action. Stored as bcrypt hashes on the user.
"""

import re
from typing import Optional
from uuid import UUID

from tillflow.app.services.passwords import hash_password, verify_password
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.entities import User

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 8


class InvalidPinError(ValueError):
    pass


def sanitize_pin(pin: str) -> str:
    """Digits only; spaces and dashes typed on a keypad are dropped"""
    return re.sub(r"\D", "", pin)


def validate_pin(pin: str) -> str:
    normalized = sanitize_pin(pin)
    if not PIN_MIN_LENGTH <= len(normalized) <= PIN_MAX_LENGTH:
        raise InvalidPinError(f"PIN must be {PIN_MIN_LENGTH} to {PIN_MAX_LENGTH} digits")
    return normalized


def hash_approval_pin(pin: str) -> str:
    return hash_password(validate_pin(pin))


async def verify_manager_pin(
    uow: UnitOfWork, business_id: UUID, pin: str
) -> Optional[User]:
    """
    First active MANAGER or OWNER of the business whose PIN matches.

    Must be called inside ``async with uow``. Returns None for an empty PIN
    without touching the store.
    """
    normalized = sanitize_pin(pin)
    if not normalized:
        return None

    for candidate in await uow.users.list_pin_approvers(business_id):
        if candidate.approval_pin_hash and verify_password(
            normalized, candidate.approval_pin_hash
        ):
            return candidate
    return None
