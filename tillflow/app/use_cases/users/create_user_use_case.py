"""
Create User Use Case

Owner adds a staff account to their business.
"""

import logging

from libs.result import Error, Result, Return
from tillflow.app.services.approval_pin import InvalidPinError, hash_approval_pin
from tillflow.app.services.passwords import MIN_PASSWORD_LENGTH, hash_password
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import AuditAction, AuditLog, Role, User
from .dtos import CreateUserCommand, StaffMember

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """
    Use case for creating a staff account.

    Business Rules:
    - Only owners may create users, always inside their own business
    - Name, email and password required, password at least 6 characters
    - Email unique across all users
    - Role defaults to CASHIER
    - An optional approval PIN must be 4 to 8 digits
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, owner: AuthenticatedUser, command: CreateUserCommand
    ) -> Result[StaffMember]:
        if owner.role != Role.owner:
            return Return.err(Error("FORBIDDEN", "Only owners can manage staff"))

        name = command.name.strip()
        email = command.email.strip().lower()

        if not name or not email or not command.password:
            return Return.err(
                Error("MISSING_FIELDS", "Name, email, and password are required")
            )
        if len(command.password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                )
            )

        approval_pin_hash = None
        if command.approval_pin:
            try:
                approval_pin_hash = hash_approval_pin(command.approval_pin)
            except InvalidPinError as e:
                return Return.err(Error("INVALID_PIN", str(e)))

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "A user with that email already exists")
                )

            user = await self.uow.users.create(
                User(
                    business_id=owner.business_id,
                    name=name,
                    email=email,
                    password_hash=hash_password(command.password),
                    approval_pin_hash=approval_pin_hash,
                    role=command.role,
                    active=True,
                )
            )

            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=owner.business_id,
                    user_id=owner.id,
                    user_name=owner.name,
                    user_role=owner.role.value,
                    action=AuditAction.user_create.value,
                    entity="User",
                    entity_id=str(user.id),
                    details={"name": name, "email": email, "role": command.role.value},
                )
            )

            await self.uow.commit()

            logger.info(f"Owner {owner.id} created {command.role.value} user {user.id}")
            return Return.ok(StaffMember.from_user(user))
