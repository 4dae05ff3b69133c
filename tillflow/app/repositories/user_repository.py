from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tillflow.domain.entities import User


class IUserRepository(ABC):
    """User repository interface (credential store) - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_id_in_business(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[User]:
        """Get user by ID only if they belong to the given business"""
        pass

    @abstractmethod
    async def list_by_business(self, business_id: UUID) -> List[User]:
        """All users of a business, active and inactive"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def list_pin_approvers(self, business_id: UUID) -> List[User]:
        """Active MANAGER and OWNER users of a business that have an approval PIN"""
        pass
