from sqlmodel.ext.asyncio.session import AsyncSession

from tillflow.app.repositories.business_repository import IBusinessRepository
from tillflow.domain.entities import Business


class BusinessRepository(IBusinessRepository):
    """Business repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, business: Business) -> Business:
        self.session.add(business)
        await self.session.flush()
        await self.session.refresh(business)
        return business
