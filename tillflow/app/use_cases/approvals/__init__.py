"""
Approval Use Cases

Manager PIN checks at the till.
"""

from .dtos import ManagerApproval
from .verify_manager_pin_use_case import VerifyManagerPinUseCase

__all__ = [
    "VerifyManagerPinUseCase",
    "ManagerApproval",
]
