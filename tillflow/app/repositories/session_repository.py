from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from tillflow.domain.entities import Session, User


class ISessionRepository(ABC):
    """Session repository interface (session store) - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def get_with_user_by_token_hash(
        self, token_hash: str
    ) -> Optional[Tuple[Session, User]]:
        """Exact-match lookup by token digest, joined with the owning user"""
        pass

    @abstractmethod
    async def delete_by_token_hash(self, token_hash: str) -> int:
        """Delete the session with this digest. Returns count deleted."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every session with expires_at strictly before now. Returns count."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user. Returns count deleted."""
        pass

    @abstractmethod
    async def delete_all_except(self, user_id: UUID, session_id: UUID) -> int:
        """Delete all sessions for a user except the specified session. Returns count."""
        pass
