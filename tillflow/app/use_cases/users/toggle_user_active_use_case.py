"""
Toggle User Active Use Case

Flip a staff account between active and deactivated.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import AuditAction, AuditLog, Role
from .dtos import StaffMember

logger = logging.getLogger(__name__)


class ToggleUserActiveUseCase:
    """
    Use case for activating or deactivating a staff account.

    Business Rules:
    - Only owners, only inside their own business
    - An owner cannot deactivate themselves
    - Deactivation deletes every session of the target
    - Users are never hard-deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, owner: AuthenticatedUser, user_id: UUID) -> Result[StaffMember]:
        if owner.role != Role.owner:
            return Return.err(Error("FORBIDDEN", "Only owners can manage staff"))
        if user_id == owner.id:
            return Return.err(
                Error("CANNOT_DEACTIVATE_SELF", "You cannot deactivate your own account")
            )

        async with self.uow:
            target = await self.uow.users.get_by_id_in_business(user_id, owner.business_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            now_active = not target.active
            target.active = now_active
            await self.uow.users.update(target)

            if not now_active:
                await self.uow.sessions.delete_all_by_user_id(target.id)

            action = AuditAction.user_update if now_active else AuditAction.user_deactivate
            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=owner.business_id,
                    user_id=owner.id,
                    user_name=owner.name,
                    user_role=owner.role.value,
                    action=action.value,
                    entity="User",
                    entity_id=str(target.id),
                    details={"name": target.name, "active": now_active},
                )
            )

            await self.uow.commit()

            logger.info(
                f"Owner {owner.id} {'activated' if now_active else 'deactivated'} user {target.id}"
            )
            return Return.ok(StaffMember.from_user(target))
