"""
Confirm Password Reset Use Case

Sets a new password from a reset link and signs the user out everywhere.
"""

import logging

from libs.result import Error, Result, Return
from tillflow.app.services.passwords import MIN_PASSWORD_LENGTH, hash_password
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import hash_token, utcnow
from tillflow.domain.entities import AuditAction, AuditLog, Role
from .dtos import ConfirmPasswordResetCommand, PasswordResetResponse

logger = logging.getLogger(__name__)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - Token is looked up by its SHA-256 digest
    - Token must exist, be unused and not expired
    - New password at least 6 characters and equal to its confirmation
    - Token is marked as used and every session of the user is deleted
    - Audited as PASSWORD_RESET

    Errors:
        - INVALID_TOKEN: Missing or unknown token
        - TOKEN_EXPIRED: Token has expired
        - TOKEN_ALREADY_USED: Token has already been used
        - WEAK_PASSWORD: New password too short
        - PASSWORD_MISMATCH: Confirmation differs
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: ConfirmPasswordResetCommand
    ) -> Result[PasswordResetResponse]:
        token = command.token.strip()
        if not token:
            return Return.err(Error("INVALID_TOKEN", "Invalid or expired password reset link"))
        if len(command.new_password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "WEAK_PASSWORD",
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                )
            )
        if command.new_password != command.confirm_password:
            return Return.err(Error("PASSWORD_MISMATCH", "Passwords do not match"))

        async with self.uow:
            reset_token = await self.uow.password_reset_tokens.get_by_token_hash(
                hash_token(token)
            )
            if reset_token is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired password reset link")
                )
            if reset_token.used:
                return Return.err(
                    Error("TOKEN_ALREADY_USED", "This password reset link has already been used")
                )
            if reset_token.is_expired_at(utcnow()):
                return Return.err(Error("TOKEN_EXPIRED", "This password reset link has expired"))

            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired password reset link")
                )

            user.password_hash = hash_password(command.new_password)
            await self.uow.users.update(user)

            reset_token.used = True
            await self.uow.password_reset_tokens.update(reset_token)

            revoked = await self.uow.sessions.delete_all_by_user_id(user.id)

            await self.uow.audit_logs.create(
                AuditLog(
                    business_id=user.business_id,
                    user_id=user.id,
                    user_name=user.name,
                    user_role=Role(user.role).value,
                    action=AuditAction.password_reset.value,
                    entity="User",
                    entity_id=str(user.id),
                    details={"sessions_revoked": revoked},
                )
            )

            await self.uow.commit()

            logger.info(f"User {user.id} reset their password, {revoked} session(s) revoked")
            return Return.ok(
                PasswordResetResponse(
                    status="success", message="Password has been reset, please sign in"
                )
            )
