"""
TillFlow Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class Role(str, Enum):
    """Staff role within a business.

    Ordered by privilege by convention only; access checks treat the roles
    as an unordered set.
    """

    cashier = "CASHIER"
    manager = "MANAGER"
    owner = "OWNER"


class AuditAction(str, Enum):
    """Actions recorded in the audit trail"""

    login = "LOGIN"
    login_failed = "LOGIN_FAILED"
    logout = "LOGOUT"
    user_create = "USER_CREATE"
    user_update = "USER_UPDATE"
    user_deactivate = "USER_DEACTIVATE"
    password_change = "PASSWORD_CHANGE"
    password_reset = "PASSWORD_RESET"
    two_factor_enable = "TWO_FACTOR_ENABLE"
    two_factor_disable = "TWO_FACTOR_DISABLE"
