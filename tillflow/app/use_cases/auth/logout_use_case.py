"""
Logout Use Case

Ends the session behind the request's cookie.
"""

from libs.result import Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import hash_token
from tillflow.domain.entities import AuditAction, AuditLog, Role
from .dtos import LogoutResponse, RequestContext


class LogoutUseCase:
    """
    Business Rules:
    - Always succeeds; a missing or unknown token is a no-op
    - Expired sessions are deleted too
    - LOGOUT is audited only when the token belonged to a user
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: RequestContext) -> Result[LogoutResponse]:
        response = LogoutResponse(status="signed_out", message="Signed out")
        if not context.session_token:
            return Return.ok(response)

        token_hash = hash_token(context.session_token)

        async with self.uow:
            row = await self.uow.sessions.get_with_user_by_token_hash(token_hash)
            await self.uow.sessions.delete_by_token_hash(token_hash)

            if row is not None:
                session, user = row
                await self.uow.audit_logs.create(
                    AuditLog(
                        business_id=user.business_id,
                        user_id=user.id,
                        user_name=user.name,
                        user_role=Role(user.role).value,
                        action=AuditAction.logout.value,
                        entity="Session",
                        entity_id=str(session.id),
                        ip_address=context.ip_address,
                    )
                )

            await self.uow.commit()

        return Return.ok(response)
