"""
Session Cookie Authentication

FastAPI dependencies that turn the session cookie into an authenticated
user, and helpers that set and clear the cookie.
"""

from datetime import UTC
from typing import Callable, Optional

from fastapi import Depends, Request, Response, status
from libs.result import Error

from config import ApplicationConfig
from tillflow.api.error import AccessDenied
from tillflow.app.services.access_guard import FORBIDDEN, UNAUTHENTICATED, AccessGuard
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import (
    AuthenticatedUser,
    IssuedSession,
    RequestContext,
)
from tillflow.depends import get_unit_of_work
from tillflow.domain.entities import Role


def client_ip(request: Request) -> Optional[str]:
    """Peer address; forwarding headers count only when TRUST_PROXY_HEADERS is set"""
    if ApplicationConfig.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip() or None
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()
    return request.client.host if request.client else None


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        session_token=request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME),
        ip_address=client_ip(request),
    )


def _deny(error: Error) -> AccessDenied:
    if error.code == FORBIDDEN:
        return AccessDenied(
            error,
            status_code=status.HTTP_403_FORBIDDEN,
            redirect_to=ApplicationConfig.DEFAULT_LANDING_PATH,
        )
    return AccessDenied(
        Error(UNAUTHENTICATED, error.message),
        status_code=status.HTTP_401_UNAUTHORIZED,
        redirect_to=ApplicationConfig.LOGIN_PATH,
    )


async def get_current_user(
    context: RequestContext = Depends(get_request_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> AuthenticatedUser:
    """
    Dependency resolving the session cookie to the signed-in user.

    Raises:
        AccessDenied: 401 / redirect to LOGIN_PATH when there is no valid session
    """
    result = await AccessGuard(uow).require_user(context)
    if result.is_err():
        raise _deny(result.error)
    return result.value


def require_role(*roles: Role) -> Callable:
    """
    Dependency factory: signed-in user whose role is exactly one of ``roles``.

    Usage:
        @router.get("/users", dependencies=[Depends(require_role(Role.owner))])
    """
    allowed = frozenset(roles)

    async def dependency(
        context: RequestContext = Depends(get_request_context),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ) -> AuthenticatedUser:
        result = await AccessGuard(uow).require_role(context, allowed)
        if result.is_err():
            raise _deny(result.error)
        return result.value

    return dependency


def set_session_cookie(response: Response, issued: IssuedSession) -> None:
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=issued.token,
        expires=issued.expires_at.replace(tzinfo=UTC),
        path="/",
        httponly=True,
        samesite="lax",
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
    )
