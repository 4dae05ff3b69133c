"""
Login Use Case

Authenticates staff credentials (and authenticator code when enrolled) and
opens a cookie session.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from libs.result import Error, Result, Return
from tillflow.app.services.login_throttle import LoginThrottle
from tillflow.app.services.maintenance import MaintenanceSweeper
from tillflow.app.services.passwords import burn_password_check, verify_password
from tillflow.app.services.two_factor import TwoFactorSecretError, verify_code
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import utcnow
from tillflow.domain.entities import AuditAction, AuditLog, Role, User
from .dtos import IssuedSession, LoginCommand
from .session_tokens import create_session, issued_session

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for staff login.

    Business Rules:
    - Unknown email, wrong password and deactivated account all return the
      same INVALID_CREDENTIALS error
    - A dummy bcrypt check runs when the email is unknown
    - Repeated failures per (email, ip) lock the pair out (TOO_MANY_ATTEMPTS)
    - Users with two-factor enabled must also present a valid code
    - Success creates a session, stamps last_login_at, audits LOGIN and then
      fires the maintenance sweep for the user's business without awaiting it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        throttle: LoginThrottle,
        sweeper: MaintenanceSweeper,
        session_ttl_days: int = 7,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.throttle = throttle
        self.sweeper = sweeper
        self.session_ttl_days = session_ttl_days
        self.clock = clock

    async def execute(self, command: LoginCommand) -> Result[IssuedSession]:
        email = command.email.strip().lower()
        password = command.password
        ip_address = command.ip_address

        if not email or not password:
            return Return.err(
                Error("MISSING_CREDENTIALS", "Email and password are required")
            )

        if self.throttle.status(email, ip_address).is_blocked:
            return Return.err(
                Error(
                    "TOO_MANY_ATTEMPTS",
                    "Too many failed sign-in attempts. Try again later.",
                )
            )

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                burn_password_check()
                self.throttle.record_failure(email, ip_address)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash) or not user.active:
                await self._record_failure(user, ip_address, reason="invalid_credentials")
                return Return.err(INVALID_CREDENTIALS)

            if user.two_factor_enabled:
                error = await self._check_two_factor(user, command.otp, ip_address)
                if error is not None:
                    return Return.err(error)

            self.throttle.clear(email, ip_address)

            now = self.clock()
            token, session = await create_session(
                self.uow, user, now, self.session_ttl_days
            )

            user.last_login_at = now
            await self.uow.users.update(user)

            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=user.business_id,
                    user_id=user.id,
                    user_name=user.name,
                    user_role=Role(user.role).value,
                    action=AuditAction.login.value,
                    entity="Session",
                    entity_id=str(session.id),
                    details={"two_factor": bool(user.two_factor_enabled)},
                    ip_address=ip_address,
                )
            )

            await self.uow.commit()

            response = issued_session(token, session, user)
            business_id = user.business_id

        self.sweeper.schedule(business_id)

        return Return.ok(response)

    async def _check_two_factor(
        self, user: User, otp: Optional[str], ip_address: Optional[str]
    ) -> Optional[Error]:
        if not otp or not otp.strip():
            return Error("TWO_FACTOR_REQUIRED", "Enter the code from your authenticator app")

        try:
            valid = verify_code(user.two_factor_secret, otp)
        except TwoFactorSecretError:
            logger.error(f"User {user.id} has two-factor enabled without a usable secret")
            return Error("TWO_FACTOR_MISCONFIGURED", "Two-factor authentication is misconfigured")

        if not valid:
            await self._record_failure(user, ip_address, reason="invalid_two_factor_code")
            return Error("INVALID_TWO_FACTOR_CODE", "Invalid authenticator code")
        return None

    async def _record_failure(
        self, user: User, ip_address: Optional[str], reason: str
    ) -> None:
        self.throttle.record_failure(user.email, ip_address)
        await self.uow.audit_logs.create(
            AuditLog(
                business_id=user.business_id,
                user_id=user.id,
                user_name=user.name,
                user_role=Role(user.role).value,
                action=AuditAction.login_failed.value,
                entity="User",
                entity_id=str(user.id),
                details={"reason": reason},
                ip_address=ip_address,
            )
        )
        await self.uow.commit()
        logger.warning(f"Failed login for user {user.id}: {reason}")
