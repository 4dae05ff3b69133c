"""
Authentication Use Cases

Registration, login/logout, password reset and session resolution.
"""

from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    AuthenticatedUser,
    ConfirmPasswordResetCommand,
    IssuedSession,
    LoginCommand,
    LogoutResponse,
    PasswordResetResponse,
    RegisterCommand,
    RequestContext,
    UserInfo,
)
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .register_use_case import RegisterUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .resolve_session_use_case import ResolveSessionUseCase

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "ResolveSessionUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "LoginCommand",
    "ConfirmPasswordResetCommand",
    # DTOs - Context
    "RequestContext",
    "AuthenticatedUser",
    # DTOs - Responses
    "IssuedSession",
    "LogoutResponse",
    "PasswordResetResponse",
    "UserInfo",
]
