"""Audit logging package."""

from nexa_ledger.audit.logger import AuditLogger, AuditSink, configure_logging

__all__ = ["AuditLogger", "AuditSink", "configure_logging"]
