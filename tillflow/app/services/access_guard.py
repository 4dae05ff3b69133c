"""
Access Guard

Composes session resolution with a role allow-list. Denials come back as
error Results; turning them into redirects or 401/403 bodies is the API
layer's job.
"""

from datetime import datetime
from typing import Callable, Iterable

from libs.result import Error, Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser, RequestContext
from tillflow.app.use_cases.auth.resolve_session_use_case import ResolveSessionUseCase
from tillflow.domain.base import utcnow
from tillflow.domain.entities import Role

UNAUTHENTICATED = "UNAUTHENTICATED"
FORBIDDEN = "FORBIDDEN"


class AccessGuard:
    """
    Two escalating checks for a request.

    Business Rules:
    - require_user: a valid session for an active user, else UNAUTHENTICATED
    - require_role: require_user plus exact membership of the user's role in
      the allow-list, else FORBIDDEN
    - No role implies another; OWNER only passes where OWNER is listed
    - No side effects
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.resolver = ResolveSessionUseCase(uow, clock=clock)

    async def require_user(self, context: RequestContext) -> Result[AuthenticatedUser]:
        user = await self.resolver.execute(context)
        if user is None or not user.active:
            return Return.err(Error(UNAUTHENTICATED, "Sign in to continue"))
        return Return.ok(user)

    async def require_role(
        self, context: RequestContext, allowed: Iterable[Role]
    ) -> Result[AuthenticatedUser]:
        result = await self.require_user(context)
        if result.is_err():
            return result

        user = result.value
        if user.role not in frozenset(allowed):
            return Return.err(
                Error(FORBIDDEN, "You do not have permission to access this page")
            )
        return result
