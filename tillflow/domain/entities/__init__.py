"""
TillFlow Domain Entities

All domain entities organized by model.
"""

from .enums import AuditAction, Role

from .business import Business
from .user import User
from .session import Session
from .audit_log import AuditLog
from .password_reset_token import PasswordResetToken

__all__ = [
    # Enums
    "AuditAction",
    "Role",
    # Entities
    "Business",
    "User",
    "Session",
    "AuditLog",
    "PasswordResetToken",
]
