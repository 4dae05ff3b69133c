"""
Two-Factor Use Case DTOs
"""

from typing import Optional

from pydantic import BaseModel


class TwoFactorStatus(BaseModel):
    """
    Enrollment state of the signed-in user.

    ``setup_secret``/``setup_uri`` are only present while a setup is pending;
    an enabled secret is never handed back out.
    """

    enabled: bool
    setup_pending: bool
    setup_secret: Optional[str] = None
    setup_uri: Optional[str] = None


class TwoFactorActionResponse(BaseModel):
    status: str
    message: str
