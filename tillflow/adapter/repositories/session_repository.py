from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.app.repositories.session_repository import ISessionRepository
from tillflow.domain.entities import Session, User


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_with_user_by_token_hash(
        self, token_hash: str
    ) -> Optional[Tuple[Session, User]]:
        """
        Single read joining the session to its user.

        Expiry is not filtered here; the caller decides validity against its
        own clock.
        """
        stmt = (
            select(Session, User)
            .join(User, User.id == Session.user_id)
            .where(Session.token_hash == token_hash)
        )
        result = await self.session.exec(stmt)
        row = result.first()
        if row is None:
            return None
        session_obj, user = row
        return session_obj, user

    async def delete_by_token_hash(self, token_hash: str) -> int:
        stmt = delete(Session).where(Session.token_hash == token_hash)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(Session).where(Session.expires_at < now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        stmt = delete(Session).where(Session.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_all_except(self, user_id: UUID, session_id: UUID) -> int:
        stmt = delete(Session).where(
            Session.user_id == user_id,
            Session.id != session_id,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
