"""
User Management Use Cases

Own-account settings and owner-only staff management.
"""

from .create_user_use_case import CreateUserUseCase
from .dtos import (
    CreateUserCommand,
    SessionsRevoked,
    StaffMember,
    UpdateAccountCommand,
    UpdateUserCommand,
)
from .list_users_use_case import ListUsersUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .toggle_user_active_use_case import ToggleUserActiveUseCase
from .update_account_use_case import UpdateAccountUseCase
from .update_user_use_case import UpdateUserUseCase

__all__ = [
    "UpdateAccountUseCase",
    "RevokeSessionsUseCase",
    "ListUsersUseCase",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "ToggleUserActiveUseCase",
    "UpdateAccountCommand",
    "CreateUserCommand",
    "UpdateUserCommand",
    "StaffMember",
    "SessionsRevoked",
]
