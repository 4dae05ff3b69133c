"""
Use Cases

Organized into domain folders:
- auth/: Registration, sign-in, sign-out, password reset, session resolution
- two_factor/: Authenticator-app enrollment
- users/: Own account and staff management
- audit/: Audit log view
- approvals/: Manager PIN approval
"""

from .approvals import VerifyManagerPinUseCase
from .audit import GetAuditLogsUseCase
from .auth import (
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResolveSessionUseCase,
)
from .two_factor import TwoFactorSetupUseCase
from .users import (
    CreateUserUseCase,
    ListUsersUseCase,
    RevokeSessionsUseCase,
    ToggleUserActiveUseCase,
    UpdateAccountUseCase,
    UpdateUserUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "ResolveSessionUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # Two-factor
    "TwoFactorSetupUseCase",
    # Users
    "UpdateAccountUseCase",
    "RevokeSessionsUseCase",
    "ListUsersUseCase",
    "CreateUserUseCase",
    "UpdateUserUseCase",
    "ToggleUserActiveUseCase",
    # Audit
    "GetAuditLogsUseCase",
    # Approvals
    "VerifyManagerPinUseCase",
]
