"""
User Management DTOs

Commands for own-account and staff changes, and the staff listing shape.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from tillflow.domain.entities import Role, User


class UpdateAccountCommand(BaseModel):
    name: str
    email: str
    current_password: str
    new_password: Optional[str] = None


class CreateUserCommand(BaseModel):
    name: str
    email: str
    password: str
    role: Role = Role.cashier
    approval_pin: Optional[str] = None


class UpdateUserCommand(BaseModel):
    user_id: UUID
    name: str
    email: str
    role: Role = Role.cashier
    active: bool = True
    new_password: Optional[str] = None
    new_approval_pin: Optional[str] = None


class StaffMember(BaseModel):
    """One row of the staff list; never carries secrets"""

    id: UUID
    name: str
    email: str
    role: Role
    active: bool
    two_factor_enabled: bool
    has_approval_pin: bool = False
    created_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "StaffMember":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            active=user.active,
            two_factor_enabled=user.two_factor_enabled,
            has_approval_pin=user.approval_pin_hash is not None,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class SessionsRevoked(BaseModel):
    revoked_count: int
