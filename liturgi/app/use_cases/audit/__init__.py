"""
Audit Use Cases
"""

from .get_audit_logs_use_case import AuditLogPage, GetAuditLogsUseCase

__all__ = ["AuditLogPage", "GetAuditLogsUseCase"]
