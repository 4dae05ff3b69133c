"""
Update User Use Case

Owner edits a staff account in their business.
"""

import logging

from libs.result import Error, Result, Return
from tillflow.app.services.approval_pin import InvalidPinError, hash_approval_pin
from tillflow.app.services.passwords import MIN_PASSWORD_LENGTH, hash_password
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import AuditAction, AuditLog, Role
from .dtos import StaffMember, UpdateUserCommand

logger = logging.getLogger(__name__)


class UpdateUserUseCase:
    """
    Use case for updating a staff account.

    Business Rules:
    - Only owners may update users, and only users of their own business
    - Email unique across all users
    - An owner cannot deactivate themselves or change their own role
    - Setting a new password or deactivating deletes all of the target's
      sessions
    - A new approval PIN replaces the old one and does not end sessions
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, owner: AuthenticatedUser, command: UpdateUserCommand
    ) -> Result[StaffMember]:
        if owner.role != Role.owner:
            return Return.err(Error("FORBIDDEN", "Only owners can manage staff"))

        name = command.name.strip()
        email = command.email.strip().lower()
        new_password = command.new_password or ""

        if not name or not email:
            return Return.err(Error("MISSING_FIELDS", "Name and email are required"))
        if new_password and len(new_password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                )
            )

        approval_pin_hash = None
        if command.new_approval_pin:
            try:
                approval_pin_hash = hash_approval_pin(command.new_approval_pin)
            except InvalidPinError as e:
                return Return.err(Error("INVALID_PIN", str(e)))

        if command.user_id == owner.id:
            if not command.active:
                return Return.err(
                    Error("CANNOT_DEACTIVATE_SELF", "You cannot deactivate your own account")
                )
            if command.role != owner.role:
                return Return.err(
                    Error("CANNOT_CHANGE_OWN_ROLE", "You cannot change your own role")
                )

        async with self.uow:
            target = await self.uow.users.get_by_id_in_business(
                command.user_id, owner.business_id
            )
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            duplicate = await self.uow.users.get_by_email(email)
            if duplicate is not None and duplicate.id != target.id:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with that email already exists")
                )

            target.name = name
            target.email = email
            target.role = command.role
            target.active = command.active
            if new_password:
                target.password_hash = hash_password(new_password)
            if approval_pin_hash:
                target.approval_pin_hash = approval_pin_hash
            await self.uow.users.update(target)

            revoked = 0
            if new_password or not command.active:
                revoked = await self.uow.sessions.delete_all_by_user_id(target.id)

            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=owner.business_id,
                    user_id=owner.id,
                    user_name=owner.name,
                    user_role=owner.role.value,
                    action=AuditAction.user_update.value,
                    entity="User",
                    entity_id=str(target.id),
                    details={
                        "name": name,
                        "email": email,
                        "role": command.role.value,
                        "active": command.active,
                        "password_changed": bool(new_password),
                        "approval_pin_changed": approval_pin_hash is not None,
                        "sessions_revoked": revoked,
                    },
                )
            )

            await self.uow.commit()

            logger.info(f"Owner {owner.id} updated user {target.id}")
            return Return.ok(StaffMember.from_user(target))
