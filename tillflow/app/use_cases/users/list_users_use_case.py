"""
List Users Use Case
"""

from typing import List

from libs.result import Error, Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import Role
from .dtos import StaffMember


class ListUsersUseCase:
    """Staff of the owner's business, active and inactive, oldest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, owner: AuthenticatedUser) -> Result[List[StaffMember]]:
        if owner.role != Role.owner:
            return Return.err(Error("FORBIDDEN", "Only owners can manage staff"))

        async with self.uow:
            users = await self.uow.users.list_by_business(owner.business_id)
            return Return.ok([StaffMember.from_user(u) for u in users])
