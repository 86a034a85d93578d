"""Audit logging package."""

from finplan.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
