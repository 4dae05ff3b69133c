"""
Two-Factor Setup Use Case

Enrollment lifecycle for authenticator-app codes: begin, confirm, cancel,
disable.
"""

import logging

from libs.result import Error, Result, Return
from tillflow.app.services.passwords import verify_password
from tillflow.app.services.two_factor import (
    TwoFactorSecretError,
    build_enrollment_uri,
    generate_secret,
    verify_code,
)
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.app.use_cases.auth.dtos import AuthenticatedUser
from tillflow.domain.entities import AuditAction, AuditLog, Role, User
from .dtos import TwoFactorActionResponse, TwoFactorStatus

logger = logging.getLogger(__name__)


class TwoFactorSetupUseCase:
    """
    Use case for two-factor enrollment.

    Business Rules:
    - Begin requires the current password and stores a pending secret
    - Confirm requires a valid code for the pending secret, then promotes it
      to the active secret and enables two-factor
    - Cancel discards a pending secret
    - Disable requires the current password and a valid code for the active
      secret, then clears both secrets
    - Enable and disable are audited
    """

    def __init__(self, uow: UnitOfWork, issuer: str = "TillFlow"):
        self.uow = uow
        self.issuer = issuer

    async def _load(self, current: AuthenticatedUser) -> Result[User]:
        user = await self.uow.users.get_by_id(current.id)
        if user is None:
            return Return.err(Error("USER_NOT_FOUND", "User not found"))
        return Return.ok(user)

    async def status(self, current: AuthenticatedUser) -> Result[TwoFactorStatus]:
        async with self.uow:
            loaded = await self._load(current)
            if loaded.is_err():
                return loaded
            user = loaded.value

            pending = bool(user.two_factor_temp_secret) and not user.two_factor_enabled
            return Return.ok(
                TwoFactorStatus(
                    enabled=user.two_factor_enabled,
                    setup_pending=pending,
                    setup_secret=user.two_factor_temp_secret if pending else None,
                    setup_uri=(
                        build_enrollment_uri(
                            user.two_factor_temp_secret, user.email, self.issuer
                        )
                        if pending
                        else None
                    ),
                )
            )

    async def begin(
        self, current: AuthenticatedUser, current_password: str
    ) -> Result[TwoFactorStatus]:
        async with self.uow:
            loaded = await self._load(current)
            if loaded.is_err():
                return loaded
            user = loaded.value

            if user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_ALREADY_ENABLED", "Two-factor authentication is already enabled")
                )
            if not verify_password(current_password, user.password_hash):
                return Return.err(Error("WRONG_PASSWORD", "Current password is incorrect"))

            secret = generate_secret()
            user.two_factor_temp_secret = secret
            await self.uow.users.update(user)
            await self.uow.commit()

            return Return.ok(
                TwoFactorStatus(
                    enabled=False,
                    setup_pending=True,
                    setup_secret=secret,
                    setup_uri=build_enrollment_uri(secret, user.email, self.issuer),
                )
            )

    async def confirm(
        self, current: AuthenticatedUser, code: str
    ) -> Result[TwoFactorActionResponse]:
        async with self.uow:
            loaded = await self._load(current)
            if loaded.is_err():
                return loaded
            user = loaded.value

            if user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_ALREADY_ENABLED", "Two-factor authentication is already enabled")
                )
            if not user.two_factor_temp_secret:
                return Return.err(
                    Error("TWO_FACTOR_NOT_READY", "Start two-factor setup before confirming")
                )

            if not verify_code(user.two_factor_temp_secret, code):
                return Return.err(Error("INVALID_TWO_FACTOR_CODE", "Invalid authenticator code"))

            user.two_factor_secret = user.two_factor_temp_secret
            user.two_factor_temp_secret = None
            user.two_factor_enabled = True
            await self.uow.users.update(user)

            await self.uow.audit_logs.create(self._audit(user, AuditAction.two_factor_enable))
            await self.uow.commit()

            return Return.ok(
                TwoFactorActionResponse(
                    status="enabled",
                    message="Two-factor authentication is now enabled for your account",
                )
            )

    async def cancel(self, current: AuthenticatedUser) -> Result[TwoFactorActionResponse]:
        async with self.uow:
            loaded = await self._load(current)
            if loaded.is_err():
                return loaded
            user = loaded.value

            if user.two_factor_temp_secret:
                user.two_factor_temp_secret = None
                await self.uow.users.update(user)
                await self.uow.commit()

            return Return.ok(
                TwoFactorActionResponse(status="cancelled", message="Two-factor setup cancelled")
            )

    async def disable(
        self, current: AuthenticatedUser, current_password: str, code: str
    ) -> Result[TwoFactorActionResponse]:
        async with self.uow:
            loaded = await self._load(current)
            if loaded.is_err():
                return loaded
            user = loaded.value

            if not user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_NOT_ENABLED", "Two-factor authentication is not enabled")
                )
            if not verify_password(current_password, user.password_hash):
                return Return.err(Error("WRONG_PASSWORD", "Current password is incorrect"))

            try:
                valid = verify_code(user.two_factor_secret, code)
            except TwoFactorSecretError:
                logger.error(f"User {user.id} has two-factor enabled without a usable secret")
                return Return.err(
                    Error("TWO_FACTOR_MISCONFIGURED", "Two-factor authentication is misconfigured")
                )
            if not valid:
                return Return.err(Error("INVALID_TWO_FACTOR_CODE", "Invalid authenticator code"))

            user.two_factor_enabled = False
            user.two_factor_secret = None
            user.two_factor_temp_secret = None
            await self.uow.users.update(user)

            await self.uow.audit_logs.create(self._audit(user, AuditAction.two_factor_disable))
            await self.uow.commit()

            return Return.ok(
                TwoFactorActionResponse(
                    status="disabled", message="Two-factor authentication disabled"
                )
            )

    @staticmethod
    def _audit(user: User, action: AuditAction) -> AuditLog:
        return AuditLog(
            business_id=user.business_id,
            user_id=user.id,
            user_name=user.name,
            user_role=Role(user.role).value,
            action=action.value,
            entity="User",
            entity_id=str(user.id),
        )
