from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.app.repositories.user_repository import IUserRepository
from tillflow.domain.entities import Role, User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id_in_business(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[User]:
        stmt = select(User).where(User.id == user_id, User.business_id == business_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_by_business(self, business_id: UUID) -> List[User]:
        stmt = (
            select(User)
            .where(User.business_id == business_id)
            .order_by(User.created_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def list_pin_approvers(self, business_id: UUID) -> List[User]:
        stmt = (
            select(User)
            .where(
                User.business_id == business_id,
                User.active == True,
                User.role.in_([Role.manager, Role.owner]),
                User.approval_pin_hash.is_not(None),
            )
            .order_by(User.created_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())
