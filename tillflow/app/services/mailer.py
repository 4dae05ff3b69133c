"""
Mailer

Transactional mail over SMTP. Without an SMTP_HOST nothing is sent and the
caller is told so; message bodies are never logged since they carry
one-time links.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

logger = logging.getLogger(__name__)


def redact_email(email: str) -> str:
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class EmailService:
    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        from_address: str = "TillFlow <noreply@tillflow.example>",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_address = from_address

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host)

    def _send(self, to_email: str, subject: str, body: str) -> bool:
        """Blocking send. Returns False instead of raising on delivery failure."""
        if not self.is_configured:
            logger.warning(
                f"SMTP_HOST not set, skipping '{subject}' email to {redact_email(to_email)}"
            )
            return False

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = to_email
        message.set_content(body)

        context = ssl.create_default_context()
        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                    server.starttls(context=context)
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.send_message(message)
            else:
                with smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, context=context, timeout=30
                ) as server:
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' email to {redact_email(to_email)}: {e}")
            return False

        logger.info(f"Sent '{subject}' email to {redact_email(to_email)}")
        return True

    def send_password_reset(self, to_email: str, reset_url: str, user_name: str) -> bool:
        body = (
            f"Hi {user_name},\n\n"
            "Someone asked to reset the password for your TillFlow account. "
            "Use the link below within the next hour to choose a new one:\n\n"
            f"{reset_url}\n\n"
            "If you did not ask for this you can ignore this email; your "
            "password will not change.\n"
        )
        return self._send(to_email, "Reset your TillFlow password", body)
