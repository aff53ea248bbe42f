"""Audit logging package."""

from currency_formatter.audit.logger import FormattingAuditLogger, create_session_id

__all__ = ["FormattingAuditLogger", "create_session_id"]
