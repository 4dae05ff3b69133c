from abc import ABC, abstractmethod

from tillflow.app.repositories.audit_log_repository import IAuditLogRepository
from tillflow.app.repositories.business_repository import IBusinessRepository
from tillflow.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from tillflow.app.repositories.session_repository import ISessionRepository
from tillflow.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    businesses: IBusinessRepository
    users: IUserRepository
    sessions: ISessionRepository
    audit_logs: IAuditLogRepository
    password_reset_tokens: IPasswordResetTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
