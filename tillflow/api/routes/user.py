from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.session_auth import get_current_user, get_request_context
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth import AuthenticatedUser, RequestContext
from tillflow.app.use_cases.users import (
    RevokeSessionsUseCase,
    SessionsRevoked,
    StaffMember,
    UpdateAccountCommand,
    UpdateAccountUseCase,
)
from tillflow.depends import get_unit_of_work

router = APIRouter(tags=["Account"])


class MeResponse(BaseModel):
    """GET /me response payload"""

    id: str
    business_id: str
    email: str
    name: str
    role: str
    two_factor_enabled: bool


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def get_me(current_user: AuthenticatedUser = Depends(get_current_user)):
    """
    Current User

    Raises:
        - 401 Unauthorized: No valid session
    """
    return MeResponse(
        id=str(current_user.id),
        business_id=str(current_user.business_id),
        email=current_user.email,
        name=current_user.name,
        role=current_user.role.value,
        two_factor_enabled=current_user.two_factor_enabled,
    )


class UpdateAccountRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    current_password: str
    new_password: Optional[str] = None


@router.put("/me", status_code=status.HTTP_200_OK, response_model=StaffMember)
async def update_account(
    request: UpdateAccountRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Own Account

    Changing the password signs out every other session of the user.

    Raises:
        - 400 Bad Request: Missing fields, weak or wrong password
        - 409 Conflict: Email already in use
    """
    command = UpdateAccountCommand(
        name=request.name,
        email=request.email,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    result = await UpdateAccountUseCase(uow).execute(
        current_user, command, ip_address=context.ip_address
    )

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        if error.code in ("MISSING_FIELDS", "WEAK_PASSWORD", "WRONG_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/me/sessions/revoke-others",
    status_code=status.HTTP_200_OK,
    response_model=SessionsRevoked,
)
async def revoke_other_sessions(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Sign Out Other Devices

    Deletes every session of the current user except this one.
    """
    result = await RevokeSessionsUseCase(uow).revoke_other_sessions(current_user)
    if result.is_err():
        raise ServerError(result.error)
    return result.value
