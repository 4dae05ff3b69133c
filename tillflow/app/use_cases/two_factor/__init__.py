"""
Two-Factor Use Cases

Authenticator-app enrollment for the signed-in user.
"""

from .dtos import TwoFactorActionResponse, TwoFactorStatus
from .two_factor_setup_use_case import TwoFactorSetupUseCase

__all__ = [
    "TwoFactorSetupUseCase",
    "TwoFactorStatus",
    "TwoFactorActionResponse",
]
