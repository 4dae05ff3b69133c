from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.session_auth import (
    clear_session_cookie,
    get_request_context,
    set_session_cookie,
)
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.app.services.mailer import EmailService
from tillflow.app.services.maintenance import MaintenanceSweeper
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth import (
    ConfirmPasswordResetCommand,
    ConfirmPasswordResetUseCase,
    IssuedSession,
    LoginCommand,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    PasswordResetResponse,
    RegisterCommand,
    RegisterUseCase,
    RequestContext,
    RequestPasswordResetUseCase,
    UserInfo,
)
from tillflow.depends import (
    get_email_service,
    get_login_throttle,
    get_maintenance_sweeper,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class SessionResponse(BaseModel):
    """Signed-in user; the session token itself only travels in the cookie"""

    user: UserInfo
    expires_at: datetime


def _signed_in(response: Response, issued: IssuedSession) -> SessionResponse:
    set_session_cookie(response, issued)
    return SessionResponse(user=issued.user, expires_at=issued.expires_at)


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    business_name: str = Field(..., max_length=255, description="Business name")
    owner_name: str = Field(..., max_length=255, description="Owner's display name")
    email: EmailStr = Field(..., description="Owner email address")
    password: str = Field(..., description="Password (min 6 chars)")
    currency: str = Field("GHS", max_length=8, description="Business currency code")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=SessionResponse
)
async def register(
    request: RegisterRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Register a Business

    Creates the business, its OWNER account and signs the owner in.

    Raises:
        - 400 Bad Request: Missing fields or weak password
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = RegisterCommand(
        business_name=request.business_name,
        owner_name=request.owner_name,
        email=request.email,
        password=request.password,
        currency=request.currency,
    )

    use_case = RegisterUseCase(uow, session_ttl_days=ApplicationConfig.SESSION_TTL_DAYS)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        if error.code in ("MISSING_FIELDS", "WEAK_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return _signed_in(response, result.value)


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    ``otp`` is only needed for accounts with two-factor enabled.
    """

    email: str = Field(..., max_length=255, description="User email address")
    password: str = Field(..., description="User password")
    otp: Optional[str] = Field(None, max_length=16, description="Authenticator code")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=SessionResponse)
async def login(
    request: LoginRequest,
    response: Response,
    context: RequestContext = Depends(get_request_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    throttle: LoginThrottle = Depends(get_login_throttle),
    sweeper: MaintenanceSweeper = Depends(get_maintenance_sweeper),
):
    """
    Staff Login

    Verifies credentials and sets the session cookie. A maintenance sweep
    for the user's business is started in the background.

    Raises:
        - 400 Bad Request: Email or password missing
        - 401 Unauthorized: Invalid credentials, two-factor code required or invalid
        - 429 Too Many Requests: Locked out after repeated failures (Retry-After set)
        - 500 Internal Server Error: Server error
    """
    command = LoginCommand(
        email=request.email,
        password=request.password,
        otp=request.otp,
        ip_address=context.ip_address,
    )

    use_case = LoginUseCase(
        uow,
        throttle,
        sweeper,
        session_ttl_days=ApplicationConfig.SESSION_TTL_DAYS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        if error.code == "TOO_MANY_ATTEMPTS":
            retry_after = throttle.status(
                request.email.strip().lower(), context.ip_address
            ).retry_after_seconds
            raise ClientError(
                error,
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(retry_after)},
            )
        if error.code in (
            "INVALID_CREDENTIALS",
            "TWO_FACTOR_REQUIRED",
            "INVALID_TWO_FACTOR_CODE",
        ):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return _signed_in(response, result.value)


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    response: Response,
    context: RequestContext = Depends(get_request_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Deletes the current session if there is one and clears the cookie.
    Always succeeds.
    """
    result = await LogoutUseCase(uow).execute(context)
    clear_session_cookie(response)
    return result.value


class RequestPasswordResetRequest(BaseModel):
    email: str = Field(..., max_length=255, description="Account email address")


@router.post(
    "/password-reset", status_code=status.HTTP_200_OK, response_model=PasswordResetResponse
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: EmailService = Depends(get_email_service),
):
    """
    Request Password Reset

    Emails a one-hour reset link. The answer is the same whether or not the
    email belongs to an account.

    Raises:
        - 400 Bad Request: Email missing
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        mailer,
        base_url=ApplicationConfig.APP_BASE_URL,
        ttl_minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES,
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_FIELDS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    token: str = Field(..., description="Token from the reset link")
    new_password: str = Field(..., description="New password (min 6 chars)")
    confirm_password: str = Field(..., description="New password again")


@router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetResponse,
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Confirm Password Reset

    Sets the new password and signs the user out of every session.

    Raises:
        - 400 Bad Request: Invalid, expired or used token, weak or mismatched password
    """
    command = ConfirmPasswordResetCommand(
        token=request.token,
        new_password=request.new_password,
        confirm_password=request.confirm_password,
    )
    result = await ConfirmPasswordResetUseCase(uow).execute(command)

    if result.is_err():
        error = result.error
        if error.code in (
            "INVALID_TOKEN",
            "TOKEN_EXPIRED",
            "TOKEN_ALREADY_USED",
            "WEAK_PASSWORD",
            "PASSWORD_MISMATCH",
        ):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    clear_session_cookie(response)
    return result.value
