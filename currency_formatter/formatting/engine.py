"""
Formatting Cache Engine

Owns the current locale/currency and formats numbers with memoized
formatters.

Flow of a format call:
1. Validate the value (must be a finite number)
2. Build a FormatterKey from locale, currency and all options
3. Cache hit -> format with the stored formatter
4. Cache miss -> construct, format, then store
5. Construction failure -> FormatConstructionError, nothing stored
6. A value the formatter cannot render -> InvalidInputError

DESIGN DECISION: Setters never touch the cache. Entries are keyed by the
locale/currency they were built with, so they remain correct after a
change, and switching back reuses them.

Setters update memory first and only then schedule the persistence
write. A format call right after set_locale() always sees the new
locale, whether or not the write has happened yet.
"""

import math
import threading
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from currency_formatter.audit import FormattingAuditLogger
from currency_formatter.formatting.cache import FormatterCache
from currency_formatter.formatting.number_formatter import (
    FormatterConfigError,
    NumberFormatter,
    UnformattableValueError,
)
from currency_formatter.models.formatting import (
    FormatOptions,
    FormatStyle,
    FormatterKey,
    PreferenceKind,
    PreferenceState,
)
from currency_formatter.services.preferences import PreferenceStoreBridge


Number = Union[int, float, Decimal]
FormatterFactory = Callable[..., NumberFormatter]


class FormattingCacheEngine:
    """
    The caller-facing formatting API for one session.

    Exposes get_locale/set_locale, get_currency/set_currency,
    format_number and format_currency. One instance per session;
    pass it to whatever needs to format.
    """

    def __init__(
        self,
        state: Optional[PreferenceState] = None,
        bridge: Optional[PreferenceStoreBridge] = None,
        cache: Optional[FormatterCache] = None,
        formatter_factory: FormatterFactory = NumberFormatter,
        audit_logger: Optional[FormattingAuditLogger] = None,
    ):
        """
        Initialize the engine.

        Args:
            state: Starting locale/currency (en-US/USD if omitted)
            bridge: Where preference changes are persisted.
                    If None, changes only live in memory.
            cache: Formatter cache (unbounded if omitted)
            formatter_factory: Builds a formatter from a locale and
                    Intl-style keyword options
            audit_logger: Structured event logger
        """
        self._state = state or PreferenceState()
        self._bridge = bridge
        self._audit_logger = audit_logger or FormattingAuditLogger()
        self._cache = cache if cache is not None else FormatterCache(
            on_evict=lambda key: self._audit_logger.formatter_evicted(key.as_tuple())
        )
        self._formatter_factory = formatter_factory
        # Guards both the preference state and the cache
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def get_locale(self) -> str:
        with self._lock:
            return self._state.locale

    def get_currency(self) -> str:
        with self._lock:
            return self._state.currency

    def set_locale(self, locale: str) -> None:
        """Switch locale. Not validated until the next format call."""
        self._set_preference(PreferenceKind.LOCALE, locale)

    def set_currency(self, currency: str) -> None:
        """Switch currency. Not validated until the next format call."""
        self._set_preference(PreferenceKind.CURRENCY, currency)

    def _set_preference(self, kind: PreferenceKind, value: str) -> None:
        with self._lock:
            old = self._state.get(kind)
            if old == value:
                return
            setattr(self._state, kind.value, value)

        self._audit_logger.preference_changed(kind.value, old, value)
        if self._bridge is not None:
            self._bridge.schedule(kind, value)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format_number(
        self,
        value: Number,
        *,
        minimum_fraction_digits: Optional[int] = None,
        maximum_fraction_digits: Optional[int] = None,
        style: Optional[Union[FormatStyle, str]] = None,
        use_grouping: bool = True,
    ) -> str:
        """
        Format a number for the current locale and currency.

        Args:
            value: A finite int, float or Decimal
            minimum_fraction_digits: Minimum fraction digits
            maximum_fraction_digits: Maximum fraction digits
            style: "decimal" (default) or "currency"
            use_grouping: Render grouping separators

        Returns:
            The formatted string

        Raises:
            InvalidInputError: If value is not a finite int, float or
                Decimal, or cannot be rendered
            FormatConstructionError: If the locale, currency or options
                are rejected by the formatter
        """
        _check_finite(value)

        with self._lock:
            try:
                options = FormatOptions(
                    minimum_fraction_digits=minimum_fraction_digits,
                    maximum_fraction_digits=maximum_fraction_digits,
                    style=style,
                    use_grouping=use_grouping,
                )
            except ValidationError as e:
                raise FormatConstructionError(
                    _first_error(e),
                    key=None,
                ) from e

            key = FormatterKey.compose(self._state, options)

            formatter = self._cache.lookup(key)
            if formatter is not None:
                try:
                    return formatter.format(value)
                except UnformattableValueError as e:
                    raise InvalidInputError(str(e)) from e

            try:
                formatter = self._formatter_factory(
                    key.locale,
                    style=key.style,
                    currency=key.currency,
                    minimum_fraction_digits=key.minimum_fraction_digits,
                    maximum_fraction_digits=key.maximum_fraction_digits,
                    use_grouping=key.use_grouping,
                )
            except FormatterConfigError as e:
                self._audit_logger.formatter_construction_failed(key.as_tuple(), str(e))
                raise FormatConstructionError(str(e), key=key) from e

            try:
                formatted = formatter.format(value)
            except UnformattableValueError as e:
                raise InvalidInputError(str(e)) from e

            self._cache.store(key, formatter)
            self._audit_logger.formatter_constructed(key.as_tuple())
            return formatted

    def format_currency(
        self,
        value: Number,
        *,
        minimum_fraction_digits: Optional[int] = None,
        maximum_fraction_digits: Optional[int] = None,
        use_grouping: bool = True,
    ) -> str:
        """format_number with style forced to currency."""
        return self.format_number(
            value,
            minimum_fraction_digits=minimum_fraction_digits,
            maximum_fraction_digits=maximum_fraction_digits,
            style=FormatStyle.CURRENCY,
            use_grouping=use_grouping,
        )

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def bridge(self) -> Optional[PreferenceStoreBridge]:
        return self._bridge

    def snapshot(self) -> PreferenceState:
        """Copy of the current preferences."""
        with self._lock:
            return self._state.model_copy()

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def cache_info(self) -> dict[str, Any]:
        """Cache size and hit/miss/construction counters."""
        with self._lock:
            return self._cache.info()


def _check_finite(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInputError(
            f"Invalid number provided for formatting: {value!r}"
        )
    if isinstance(value, int):
        # Always finite; math.isfinite would overflow on huge ints
        return
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        finite = math.isfinite(value)
    if not finite:
        raise InvalidInputError(
            f"Invalid number provided for formatting: {value!r}"
        )


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}"


class FormattingError(Exception):
    """Base exception for formatting operations."""
    pass


class InvalidInputError(FormattingError, TypeError):
    """The value to format is not a finite number."""
    pass


class FormatConstructionError(FormattingError, ValueError):
    """
    The formatter rejected the locale, currency or options.

    Attributes:
        reason: Message from the underlying formatter
        key: The cache key that failed, if one was built
    """

    def __init__(self, reason: str, key: Optional[FormatterKey] = None):
        self.reason = reason
        self.key = key
        super().__init__(f"Failed to format currency: {reason}")
