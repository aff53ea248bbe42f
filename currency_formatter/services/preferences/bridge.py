"""
Preference Store Bridge

Connects the formatting session to durable storage. It seeds the
initial locale/currency and writes changes back.

DESIGN DECISION: Persistence is best-effort. A failed read or write only
affects the defaults of the *next* session, so the bridge logs the
failure and carries on. Nothing here ever raises into a format call.

Writes are two-step: the session mutates its in-memory state, then
schedules a write here. Scheduled writes are applied on flush(), so a
format call never waits on storage.
"""

from collections import OrderedDict
from typing import Optional

from currency_formatter.audit import FormattingAuditLogger
from currency_formatter.models.formatting import PreferenceKind
from currency_formatter.services.preferences.interface import PreferenceStoreInterface


class PreferenceStoreBridge:
    """
    Pass-through between the session and a preference store.

    Values are not validated; any string is forwarded.
    """

    def __init__(
        self,
        store: PreferenceStoreInterface,
        audit_logger: Optional[FormattingAuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or FormattingAuditLogger()
        # One pending write per kind; a later change replaces an earlier one
        self._pending: "OrderedDict[PreferenceKind, str]" = OrderedDict()

    @property
    def store(self) -> PreferenceStoreInterface:
        return self._store

    def load(self) -> tuple[Optional[str], Optional[str]]:
        """
        Read the stored preferences.

        Returns:
            (locale, currency); either may be None if nothing is stored
            or the store could not be read.
        """
        try:
            locale = self._store.get(PreferenceKind.LOCALE.value)
            currency = self._store.get(PreferenceKind.CURRENCY.value)
        except Exception as e:
            # Unreadable storage only costs the stored defaults
            self._audit_logger.preference_load_failed(str(e))
            return None, None

        return locale, currency

    def save(self, kind: PreferenceKind, value: str) -> bool:
        """
        Persist one value immediately.

        Returns True if the write succeeded. Failures are logged, not raised.
        """
        try:
            self._store.set(kind.value, value)
        except Exception as e:
            # Log failure but don't raise
            self._audit_logger.preference_persist_failed(kind.value, value, str(e))
            return False
        return True

    def schedule(self, kind: PreferenceKind, value: str) -> None:
        """Queue a write to be applied on the next flush()."""
        self._pending.pop(kind, None)
        self._pending[kind] = value

    def pending(self) -> list[tuple[PreferenceKind, str]]:
        """Writes waiting for flush(), oldest first."""
        return list(self._pending.items())

    def flush(self) -> int:
        """
        Apply all queued writes.

        Returns:
            Number of writes attempted
        """
        attempted = 0
        while self._pending:
            kind, value = self._pending.popitem(last=False)
            self.save(kind, value)
            attempted += 1
        return attempted
