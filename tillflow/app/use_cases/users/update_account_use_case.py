"""
Update Account Use Case

Self-service changes to name, email and password.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from tillflow.app.services.passwords import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    verify_password,
)
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import AuditAction, AuditLog, Role
from .dtos import StaffMember, UpdateAccountCommand

logger = logging.getLogger(__name__)


class UpdateAccountUseCase:
    """
    Use case for a user editing their own account.

    Business Rules:
    - Current password is required for any change
    - Email stays unique across all users
    - A new password must be at least 6 characters
    - Changing the password signs out every OTHER session of the user;
      the session making the change stays valid
    - Password changes are audited
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        current: AuthenticatedUser,
        command: UpdateAccountCommand,
        ip_address: Optional[str] = None,
    ) -> Result[StaffMember]:
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

        async with self.uow:
            user = await self.uow.users.get_by_id(current.id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not verify_password(command.current_password, user.password_hash):
                return Return.err(Error("WRONG_PASSWORD", "Current password is incorrect"))

            if email != user.email:
                duplicate = await self.uow.users.get_by_email(email)
                if duplicate is not None and duplicate.id != user.id:
                    return Return.err(
                        Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                    )

            user.name = name
            user.email = email
            if new_password:
                user.password_hash = hash_password(new_password)
            await self.uow.users.update(user)

            if new_password:
                revoked = await self.uow.sessions.delete_all_except(
                    user.id, current.session_id
                )
                await self.uow.audit_logs.create(
                    AuditLog(
                        business_id=user.business_id,
                        user_id=user.id,
                        user_name=user.name,
                        user_role=Role(user.role).value,
                        action=AuditAction.password_change.value,
                        entity="User",
                        entity_id=str(user.id),
                        details={"other_sessions_revoked": revoked},
                        ip_address=ip_address,
                    )
                )
                logger.info(
                    f"User {user.id} changed password, {revoked} other session(s) revoked"
                )

            await self.uow.commit()

            return Return.ok(StaffMember.from_user(user))
