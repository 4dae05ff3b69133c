from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.adapter.repositories.audit_log_repository import AuditLogRepository
from tillflow.adapter.repositories.business_repository import BusinessRepository
from tillflow.adapter.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from tillflow.adapter.repositories.session_repository import SessionRepository
from tillflow.adapter.repositories.user_repository import UserRepository
from tillflow.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern

    ``close_on_exit`` is set when the unit of work owns its session, as the
    background maintenance sweep does; request-scoped sessions are closed by
    the dependency that opened them.
    """

    def __init__(self, session: AsyncSession, close_on_exit: bool = False):
        self.session = session
        self.close_on_exit = close_on_exit

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.businesses = BusinessRepository(self.session)
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.audit_logs = AuditLogRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()
        if self.close_on_exit:
            await self.session.close()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
