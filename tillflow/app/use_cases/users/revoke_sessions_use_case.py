"""
Revoke Sessions Use Case

Signs a user out of their other devices.
"""

from libs.result import Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from .dtos import SessionsRevoked


class RevokeSessionsUseCase:
    """
    Use case for revoking a user's own sessions.

    Business Rules:
    - Self-service only: the caller's current session is always kept
    - Sessions are deleted, not flagged
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def revoke_other_sessions(
        self, current: AuthenticatedUser
    ) -> Result[SessionsRevoked]:
        async with self.uow:
            count = await self.uow.sessions.delete_all_except(
                current.id, current.session_id
            )
            await self.uow.commit()

            return Return.ok(SessionsRevoked(revoked_count=count))
