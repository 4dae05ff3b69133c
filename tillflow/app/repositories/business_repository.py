from abc import ABC, abstractmethod

from tillflow.domain.entities import Business


class IBusinessRepository(ABC):
    """Business repository interface - application layer"""

    @abstractmethod
    async def create(self, business: Business) -> Business:
        """Create a new business"""
        pass
