"""
Audit Use Cases
"""

from .get_audit_logs_use_case import GetAuditLogsUseCase

__all__ = ["GetAuditLogsUseCase"]
