"""Audit logging package."""

from loan_tracker.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
