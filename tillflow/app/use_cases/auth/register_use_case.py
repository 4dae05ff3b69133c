"""
Register Use Case

Self-service signup: a new business, its OWNER, and a signed-in session.
"""

from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from tillflow.app.services.passwords import MIN_PASSWORD_LENGTH, hash_password
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import utcnow
from tillflow.domain.entities import AuditAction, AuditLog, Business, Role, User
from .dtos import IssuedSession, RegisterCommand
from .session_tokens import create_session, issued_session


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. All fields required, password at least 6 characters
    2. Email is normalized (trimmed, lowercased) and must be unused
    3. Create Business, then the OWNER user with a bcrypt password hash
    4. Create a session so the owner lands signed in
    5. Audit the account creation, commit atomically
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_ttl_days: int = 7,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.session_ttl_days = session_ttl_days
        self.clock = clock

    async def execute(self, command: RegisterCommand) -> Result[IssuedSession]:
        business_name = command.business_name.strip()
        owner_name = command.owner_name.strip()
        email = command.email.strip().lower()
        currency = (command.currency or "GHS").strip().upper()

        if not business_name or not owner_name or not email or not command.password:
            return Return.err(Error("MISSING_FIELDS", "All fields are required"))
        if len(command.password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                )
            )

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            business = await self.uow.businesses.create(
                Business(name=business_name, currency=currency)
            )

            owner = await self.uow.users.create(
                User(
                    business_id=business.id,
                    name=owner_name,
                    email=email,
                    password_hash=hash_password(command.password),
                    role=Role.owner,
                    active=True,
                )
            )

            now = self.clock()
            token, session = await create_session(
                self.uow, owner, now, self.session_ttl_days
            )
            owner.last_login_at = now
            await self.uow.users.update(owner)

            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=business.id,
                    user_id=owner.id,
                    user_name=owner.name,
                    user_role=Role.owner.value,
                    action=AuditAction.user_create.value,
                    entity="User",
                    entity_id=str(owner.id),
                    details={"source": "registration", "business_name": business_name},
                )
            )

            await self.uow.commit()

            return Return.ok(issued_session(token, session, owner))
