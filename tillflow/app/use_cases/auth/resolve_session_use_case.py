"""
Resolve Session Use Case

Turns the opaque session token of a request into the signed-in user.
"""

from datetime import datetime
from typing import Callable, Optional

from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import hash_token, utcnow
from .dtos import AuthenticatedUser, RequestContext


class ResolveSessionUseCase:
    """
    Use case for session resolution.

    Business Rules:
    - No token means no user; never an error
    - Unknown and expired tokens are indistinguishable to the caller
    - A session is valid only while expires_at is strictly after now
    - Read-only: expired rows are left for the maintenance sweep
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, context: RequestContext) -> Optional[AuthenticatedUser]:
        token = context.session_token
        if not token:
            return None

        async with self.uow:
            row = await self.uow.sessions.get_with_user_by_token_hash(hash_token(token))
            if row is None:
                return None

            session, user = row
            if not session.is_valid_at(self.clock()):
                return None

            return AuthenticatedUser.from_entities(session, user)
