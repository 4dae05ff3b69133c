"""
Request Password Reset Use Case

Issues a one-time reset link for the forgot-password page.
"""

import asyncio
import logging
import secrets
from datetime import timedelta

from libs.result import Error, Result, Return
from tillflow.app.services.mailer import EmailService, redact_email
from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import hash_token, utcnow
from tillflow.domain.entities import PasswordResetToken
from .dtos import PasswordResetResponse

logger = logging.getLogger(__name__)

SENT_MESSAGE = "If the email exists, a password reset link has been sent"


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - 32 random bytes, hex encoded; only the SHA-256 digest is stored
    - Token expires after ttl_minutes (one hour by default)
    - Earlier unused tokens of the user are retired
    - Unknown and inactive emails get the same answer as real ones
    - The email is sent after commit; delivery failure is logged, not reported
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mailer: EmailService,
        base_url: str,
        ttl_minutes: int = 60,
    ):
        self.uow = uow
        self.mailer = mailer
        self.base_url = base_url.rstrip("/")
        self.ttl_minutes = ttl_minutes

    async def execute(self, email: str) -> Result[PasswordResetResponse]:
        email = email.strip().lower()
        if not email:
            return Return.err(Error("MISSING_FIELDS", "Email is required"))

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or not user.active:
                logger.info(
                    f"Password reset requested for unknown or inactive {redact_email(email)}"
                )
                return Return.ok(PasswordResetResponse(status="sent", message=SENT_MESSAGE))

            await self.uow.password_reset_tokens.mark_unused_as_used(user.id)

            token = secrets.token_hex(32)
            await self.uow.password_reset_tokens.create(
                PasswordResetToken(
                    user_id=user.id,
                    token_hash=hash_token(token),
                    expires_at=utcnow() + timedelta(minutes=self.ttl_minutes),
                )
            )

            await self.uow.commit()

            user_id, to_email, user_name = user.id, user.email, user.name

        reset_url = f"{self.base_url}/login/reset-password?token={token}"
        sent = await asyncio.to_thread(
            self.mailer.send_password_reset, to_email, reset_url, user_name
        )
        logger.info(f"Password reset requested for user {user_id}, email sent: {sent}")

        return Return.ok(PasswordResetResponse(status="sent", message=SENT_MESSAGE))
