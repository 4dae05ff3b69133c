"""
Approval API Routes

Manager PIN checks for actions a cashier cannot approve alone.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tillflow.api.error import ClientError, ServerError
from tillflow.api.utils.session_auth import get_current_user, get_request_context
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.approvals import ManagerApproval, VerifyManagerPinUseCase
from tillflow.app.use_cases.auth import AuthenticatedUser, RequestContext
from tillflow.depends import get_pin_throttle, get_unit_of_work

router = APIRouter(prefix="/approvals", tags=["Approvals"])


class VerifyPinRequest(BaseModel):
    pin: str = Field(..., max_length=16, description="Manager or owner approval PIN")


@router.post("/verify-pin", status_code=status.HTTP_200_OK, response_model=ManagerApproval)
async def verify_pin(
    request: VerifyPinRequest,
    current: AuthenticatedUser = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    throttle: LoginThrottle = Depends(get_pin_throttle),
):
    """
    Verify Manager PIN

    Returns the approving manager or owner of the caller's business.

    Raises:
        - 400 Bad Request: PIN missing
        - 403 Forbidden: No active manager or owner has this PIN
        - 429 Too Many Requests: Too many wrong PINs from this address
    """
    use_case = VerifyManagerPinUseCase(uow, throttle)
    result = await use_case.execute(current, request.pin, context.ip_address)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_PIN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        if error.code == "INVALID_PIN":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        if error.code == "TOO_MANY_ATTEMPTS":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value
