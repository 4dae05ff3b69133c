"""
Two-Factor API Routes

Authenticator-app enrollment for the signed-in user.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.qr import qr_data_url
from tillflow.api.utils.session_auth import get_current_user
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth import AuthenticatedUser
from tillflow.app.use_cases.two_factor import (
    TwoFactorActionResponse,
    TwoFactorSetupUseCase,
    TwoFactorStatus,
)
from tillflow.depends import get_unit_of_work

router = APIRouter(prefix="/two-factor", tags=["Two-Factor"])

_BAD_REQUEST_CODES = (
    "WRONG_PASSWORD",
    "INVALID_TWO_FACTOR_CODE",
    "TWO_FACTOR_NOT_READY",
)
_CONFLICT_CODES = ("TWO_FACTOR_ALREADY_ENABLED", "TWO_FACTOR_NOT_ENABLED")


def _raise_for(error):
    if error.code in _BAD_REQUEST_CODES:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code in _CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    if error.code == "USER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    raise ServerError(error)


class TwoFactorStatusResponse(TwoFactorStatus):
    """Enrollment state plus a scannable QR code while setup is pending"""

    qr_code: Optional[str] = None


def _with_qr(state: TwoFactorStatus) -> TwoFactorStatusResponse:
    return TwoFactorStatusResponse(
        **state.model_dump(),
        qr_code=qr_data_url(state.setup_uri) if state.setup_uri else None,
    )


def _use_case(uow: UnitOfWork) -> TwoFactorSetupUseCase:
    return TwoFactorSetupUseCase(uow, issuer=ApplicationConfig.TWO_FACTOR_ISSUER)


@router.get("", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse)
async def get_status(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await _use_case(uow).status(current_user)
    if result.is_err():
        _raise_for(result.error)
    return _with_qr(result.value)


class BeginSetupRequest(BaseModel):
    current_password: str = Field(..., description="Current account password")


@router.post(
    "/setup", status_code=status.HTTP_200_OK, response_model=TwoFactorStatusResponse
)
async def begin_setup(
    request: BeginSetupRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Begin Two-Factor Setup

    Generates a pending secret and returns it with its otpauth URI and QR code.

    Raises:
        - 400 Bad Request: Wrong password
        - 409 Conflict: Two-factor already enabled
    """
    result = await _use_case(uow).begin(current_user, request.current_password)
    if result.is_err():
        _raise_for(result.error)
    return _with_qr(result.value)


class CodeRequest(BaseModel):
    code: str = Field(..., max_length=16, description="6-digit authenticator code")


@router.post(
    "/confirm", status_code=status.HTTP_200_OK, response_model=TwoFactorActionResponse
)
async def confirm_setup(
    request: CodeRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Confirm Two-Factor Setup

    Raises:
        - 400 Bad Request: No pending setup or invalid code
        - 409 Conflict: Two-factor already enabled
    """
    result = await _use_case(uow).confirm(current_user, request.code)
    if result.is_err():
        _raise_for(result.error)
    return result.value


@router.post(
    "/cancel", status_code=status.HTTP_200_OK, response_model=TwoFactorActionResponse
)
async def cancel_setup(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await _use_case(uow).cancel(current_user)
    if result.is_err():
        _raise_for(result.error)
    return result.value


class DisableRequest(BaseModel):
    current_password: str
    code: str = Field(..., max_length=16)


@router.post(
    "/disable", status_code=status.HTTP_200_OK, response_model=TwoFactorActionResponse
)
async def disable(
    request: DisableRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Disable Two-Factor

    Raises:
        - 400 Bad Request: Wrong password or invalid code
        - 409 Conflict: Two-factor not enabled
    """
    result = await _use_case(uow).disable(
        current_user, request.current_password, request.code
    )
    if result.is_err():
        _raise_for(result.error)
    return result.value
