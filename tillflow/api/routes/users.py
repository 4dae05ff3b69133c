"""
Staff API Routes

Owner-only management of the business's user accounts.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.session_auth import require_role
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth import AuthenticatedUser
from tillflow.app.use_cases.users import (
    CreateUserCommand,
    CreateUserUseCase,
    ListUsersUseCase,
    StaffMember,
    ToggleUserActiveUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
)
from tillflow.depends import get_unit_of_work
from tillflow.domain.entities import Role

router = APIRouter(prefix="/users", tags=["Staff"])

require_owner = require_role(Role.owner)


def _raise_for(error):
    if error.code in (
        "MISSING_FIELDS",
        "WEAK_PASSWORD",
        "INVALID_PIN",
        "CANNOT_DEACTIVATE_SELF",
        "CANNOT_CHANGE_OWN_ROLE",
    ):
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code == "FORBIDDEN":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    if error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code == "EMAIL_ALREADY_EXISTS":
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ServerError(error)


@router.get("", status_code=status.HTTP_200_OK, response_model=List[StaffMember])
async def list_users(
    owner: AuthenticatedUser = Depends(require_owner),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListUsersUseCase(uow).execute(owner)
    if result.is_err():
        _raise_for(result.error)
    return result.value


class CreateUserRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    password: str
    role: Role = Role.cashier
    approval_pin: Optional[str] = Field(None, max_length=16, description="4-8 digit PIN")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=StaffMember)
async def create_user(
    request: CreateUserRequest,
    owner: AuthenticatedUser = Depends(require_owner),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Staff Account

    Raises:
        - 400 Bad Request: Missing fields, weak password or malformed PIN
        - 409 Conflict: Email already exists
    """
    command = CreateUserCommand(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
        approval_pin=request.approval_pin,
    )
    result = await CreateUserUseCase(uow).execute(owner, command)
    if result.is_err():
        _raise_for(result.error)
    return result.value


class UpdateUserRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    role: Role = Role.cashier
    active: bool = True
    new_password: Optional[str] = None
    new_approval_pin: Optional[str] = Field(None, max_length=16)


@router.put("/{user_id}", status_code=status.HTTP_200_OK, response_model=StaffMember)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    owner: AuthenticatedUser = Depends(require_owner),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Staff Account

    A new password or deactivation signs the user out everywhere.

    Raises:
        - 400 Bad Request: Invalid change (including deactivating yourself)
        - 404 Not Found: No such user in this business
        - 409 Conflict: Email already exists
    """
    command = UpdateUserCommand(
        user_id=user_id,
        name=request.name,
        email=request.email,
        role=request.role,
        active=request.active,
        new_password=request.new_password,
        new_approval_pin=request.new_approval_pin,
    )
    result = await UpdateUserUseCase(uow).execute(owner, command)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.post(
    "/{user_id}/toggle-active", status_code=status.HTTP_200_OK, response_model=StaffMember
)
async def toggle_user_active(
    user_id: UUID,
    owner: AuthenticatedUser = Depends(require_owner),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ToggleUserActiveUseCase(uow).execute(owner, user_id)
    if result.is_err():
        _raise_for(result.error)
    return result.value
