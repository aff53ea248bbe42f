"""
Session Wiring for Currency Formatter

Builds one formatting session: preference store, bridge, cache and
engine, seeded from whatever the user chose last time.

DESIGN DECISION: There is no module-level engine. Callers create a
session once at startup and pass the engine to whatever needs to
format. Two sessions never share state.
"""

from typing import Optional

from currency_formatter.audit import FormattingAuditLogger
from currency_formatter.config import PreferenceBackend, Settings, get_settings
from currency_formatter.formatting import FormatterCache, FormattingCacheEngine
from currency_formatter.models.formatting import PreferenceState
from currency_formatter.services.preferences import (
    InMemoryPreferenceStore,
    JSONFilePreferenceStore,
    PreferenceStoreBridge,
    PreferenceStoreInterface,
)


def create_preference_store(settings: Optional[Settings] = None) -> PreferenceStoreInterface:
    """Build the preference store selected in configuration."""
    settings = settings or get_settings()
    prefs = settings.preferences

    if prefs.backend == PreferenceBackend.MEMORY:
        return InMemoryPreferenceStore()

    return JSONFilePreferenceStore(
        prefs.file_path,
        write_attempts=prefs.write_attempts,
    )


def create_formatter_session(
    store: Optional[PreferenceStoreInterface] = None,
    settings: Optional[Settings] = None,
    audit_logger: Optional[FormattingAuditLogger] = None,
) -> FormattingCacheEngine:
    """
    Factory function to create a formatting session.

    Args:
        store: Durable preference store. If None, one is built from
               configuration.
        settings: Settings to use (defaults to get_settings())
        audit_logger: Logger shared by the bridge and the engine

    Returns:
        A FormattingCacheEngine seeded with the stored locale/currency,
        or the configured defaults where nothing is stored.

    Note:
        set_locale()/set_currency() only queue the write. Nothing reaches
        the store until engine.bridge.flush() is called. Use
        FormatterSession, which flushes on exit, unless the caller
        flushes itself (the Streamlit app does so after each run).
    """
    settings = settings or get_settings()
    formatter_settings = settings.formatter
    audit_logger = audit_logger or FormattingAuditLogger()

    if store is None:
        store = create_preference_store(settings)

    bridge = PreferenceStoreBridge(store, audit_logger=audit_logger)
    stored_locale, stored_currency = bridge.load()

    state = PreferenceState(
        locale=stored_locale or formatter_settings.default_locale,
        currency=stored_currency or formatter_settings.default_currency,
    )

    cache = FormatterCache(
        max_size=formatter_settings.cache_max_size,
        on_evict=lambda key: audit_logger.formatter_evicted(key.as_tuple()),
    )

    return FormattingCacheEngine(
        state=state,
        bridge=bridge,
        cache=cache,
        audit_logger=audit_logger,
    )


class FormatterSession:
    """
    Context manager around a formatting session.

    Pending preference writes are flushed on exit, so a script or a
    request handler can change preferences freely and persist once.

        with FormatterSession() as formatter:
            formatter.set_currency("EUR")
            print(formatter.format_currency(1234.56))
    """

    def __init__(
        self,
        store: Optional[PreferenceStoreInterface] = None,
        settings: Optional[Settings] = None,
    ):
        self.engine = create_formatter_session(store=store, settings=settings)

    def flush(self) -> int:
        """Persist queued preference changes now."""
        bridge = self.engine.bridge
        return bridge.flush() if bridge is not None else 0

    def __enter__(self) -> FormattingCacheEngine:
        return self.engine

    def __exit__(self, exc_type, exc, tb) -> None:
        self.flush()
