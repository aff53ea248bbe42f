"""
Audit Logger

DESIGN DECISION: Every event that changes what the user sees is logged:
preference changes, formatter construction, and persistence failures.
This provides:
1. Traceability of why a value rendered the way it did
2. Visibility into persistence problems that are otherwise swallowed
3. A view of cache behaviour without a metrics stack

The audit logger:
- Only observes; it never changes the outcome of a call
- Binds a session ID so events from one session can be grouped
"""

from typing import Any, Optional
from uuid import UUID, uuid4

import structlog


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class FormattingAuditLogger:
    """
    Structured logging for one formatting session.

    Events go to the standard library logging tree via structlog.
    """

    def __init__(self, session_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            session_id: Identifier bound to every event.
                        A fresh one is created if omitted.
        """
        self.session_id = session_id or create_session_id()
        self._logger = structlog.get_logger("currency_formatter").bind(
            session_id=str(self.session_id)
        )

    def _emit(self, level: str, event: str, **fields: Any) -> None:
        getattr(self._logger, level)(event, **fields)

    def preference_changed(self, kind: str, old: str, new: str) -> None:
        """Log a locale or currency change."""
        self._emit("info", "preference_changed", kind=kind, old=old, new=new)

    def preference_load_failed(self, error: str) -> None:
        """Log a failure to read stored preferences."""
        self._emit("warning", "preference_load_failed", error=error)

    def preference_persist_failed(self, kind: str, value: str, error: str) -> None:
        """Log a failed preference write."""
        self._emit(
            "warning",
            "preference_persist_failed",
            kind=kind,
            value=value,
            error=error,
        )

    def formatter_constructed(self, key: tuple) -> None:
        self._emit("debug", "formatter_constructed", key=list(key))

    def formatter_construction_failed(self, key: tuple, error: str) -> None:
        self._emit(
            "error",
            "formatter_construction_failed",
            key=list(key),
            error=error,
        )

    def formatter_evicted(self, key: tuple) -> None:
        self._emit("debug", "formatter_evicted", key=list(key))


def create_session_id() -> UUID:
    """
    Create a new session ID for grouping related events.

    Use this once when a formatting session starts.
    """
    return uuid4()
