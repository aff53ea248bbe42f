"""
Tests for the FormattingCacheEngine

Test strategy:
1. Construction is counted with a wrapping factory, so cache hits and
   misses are observed directly
2. Preferences use an in-memory store (no disk, no network)
"""

import threading
from decimal import Decimal
from fractions import Fraction

import pytest

from currency_formatter.formatting import (
    FormatConstructionError,
    FormatterCache,
    FormattingCacheEngine,
    FormattingError,
    InvalidInputError,
    NumberFormatter,
    UnformattableValueError,
)
from currency_formatter.models.formatting import PreferenceKind, PreferenceState
from currency_formatter.services.preferences import (
    InMemoryPreferenceStore,
    PreferenceStoreBridge,
)


class CountingFactory:
    """Formatter factory that counts constructions."""

    def __init__(self):
        self.calls = 0

    def __call__(self, locale, **options):
        self.calls += 1
        return NumberFormatter(locale, **options)


@pytest.fixture
def factory():
    return CountingFactory()


@pytest.fixture
def store():
    return InMemoryPreferenceStore()


@pytest.fixture
def engine(factory, store):
    return FormattingCacheEngine(
        state=PreferenceState(locale="en-US", currency="USD"),
        bridge=PreferenceStoreBridge(store),
        formatter_factory=factory,
    )


def plain_spaces(text: str) -> str:
    return text.replace("\u202f", " ").replace("\xa0", " ")


class TestPreferences:
    """Tests for locale/currency getters and setters."""

    def test_defaults(self):
        """Test that a bare engine starts at en-US/USD."""
        engine = FormattingCacheEngine()
        assert engine.get_locale() == "en-US"
        assert engine.get_currency() == "USD"

    def test_set_locale(self, engine):
        """Test changing locale."""
        engine.set_locale("fr-FR")
        assert engine.get_locale() == "fr-FR"

    def test_set_currency(self, engine):
        """Test changing currency."""
        engine.set_currency("EUR")
        assert engine.get_currency() == "EUR"

    def test_setter_accepts_invalid_values(self, engine):
        """Test that setters never validate."""
        engine.set_locale("definitely not a locale")
        engine.set_currency("EURO")
        assert engine.get_locale() == "definitely not a locale"
        assert engine.get_currency() == "EURO"

    def test_setter_does_not_clear_cache(self, engine):
        """Test that existing entries survive a preference change."""
        engine.format_number(1)
        engine.set_locale("fr-FR")
        engine.set_currency("EUR")
        assert engine.cache_size() == 1

    def test_setter_schedules_write(self, engine, store):
        """Test that a change is queued, not written immediately."""
        engine.set_locale("fr-FR")
        assert store.get("locale") is None
        assert engine.bridge.pending() == [(PreferenceKind.LOCALE, "fr-FR")]

        engine.bridge.flush()
        assert store.get("locale") == "fr-FR"

    def test_same_value_schedules_nothing(self, engine):
        """Test that re-setting the current value is a no-op."""
        engine.set_currency("USD")
        assert engine.bridge.pending() == []

    def test_format_sees_new_locale_before_flush(self, engine):
        """Test that formatting uses in-memory state, not storage."""
        engine.set_locale("de-DE")
        assert engine.format_number(1234.56) == "1.234,56"

    def test_engine_without_bridge(self):
        """Test that an engine with no bridge still accepts changes."""
        engine = FormattingCacheEngine()
        engine.set_currency("EUR")
        assert engine.bridge is None
        assert engine.get_currency() == "EUR"

    def test_snapshot_is_a_copy(self, engine):
        """Test that snapshot() does not expose live state."""
        snapshot = engine.snapshot()
        engine.set_locale("fr-FR")
        assert snapshot.locale == "en-US"


class TestFormatting:
    """Tests for format_number and format_currency output."""

    def test_format_number_en_us(self, engine):
        """Test the basic en-US number."""
        assert engine.format_number(1234.56) == "1,234.56"

    def test_format_number_fr_fr(self, engine):
        """Test that fr-FR uses a different decimal marker."""
        engine.set_locale("fr-FR")
        formatted = engine.format_number(1234.56)
        assert plain_spaces(formatted) == "1 234,56"

    def test_format_currency_usd(self, engine):
        """Test USD currency formatting."""
        assert engine.format_currency(1234.56) == "$1,234.56"

    def test_format_currency_eur(self, engine):
        """Test EUR currency formatting in en-US."""
        engine.set_currency("EUR")
        formatted = engine.format_currency(1234.56)
        assert "€" in formatted
        assert "1,234.56" in formatted

    def test_format_currency_three_digits(self, engine):
        """Test fixed fraction digits on currency."""
        assert engine.format_currency(
            1234.56,
            minimum_fraction_digits=3,
            maximum_fraction_digits=3,
        ) == "$1,234.560"

    def test_format_number_with_currency_style(self, engine):
        """Test that format_currency equals format_number with style=currency."""
        assert engine.format_number(9.5, style="currency") == engine.format_currency(9.5)

    def test_grouping_off(self, engine):
        """Test use_grouping=False."""
        assert engine.format_number(1234.56, use_grouping=False) == "1234.56"

    def test_decimal_input(self, engine):
        """Test Decimal values."""
        assert engine.format_currency(Decimal("19.99")) == "$19.99"


class TestCaching:
    """Tests for formatter memoization."""

    def test_repeat_call_constructs_once(self, engine, factory):
        """Test that identical calls construct exactly one formatter."""
        first = engine.format_number(1234.56, minimum_fraction_digits=2)
        second = engine.format_number(1234.56, minimum_fraction_digits=2)
        assert first == second
        assert factory.calls == 1
        assert engine.cache_info()["hits"] == 1

    def test_different_values_share_formatter(self, engine, factory):
        """Test that the value is not part of the key."""
        engine.format_number(1)
        engine.format_number(2)
        engine.format_number(3.75)
        assert factory.calls == 1

    def test_currency_revert_reuses_entry(self, engine, factory):
        """Test that switching currency back reuses the original formatter."""
        usd = engine.format_currency(10)
        engine.set_currency("EUR")
        engine.format_currency(10)
        engine.set_currency("USD")
        again = engine.format_currency(10)

        assert usd == again
        assert factory.calls == 2

    def test_locale_revert_reuses_entry(self, engine, factory):
        """Test that switching locale back reuses the original formatter."""
        engine.format_number(10)
        engine.set_locale("fr-FR")
        engine.format_number(10)
        engine.set_locale("en-US")
        engine.format_number(10)
        assert factory.calls == 2

    def test_decimal_style_keyed_by_currency(self, engine, factory):
        """Test that currency is part of the key even for decimal style."""
        engine.format_number(10)
        engine.set_currency("EUR")
        engine.format_number(10)
        assert factory.calls == 2
        assert engine.cache_size() == 2

    def test_omitted_and_explicit_bounds_are_separate_entries(self, engine, factory):
        """Test that an omitted bound does not collide with an explicit one."""
        engine.format_number(5)
        engine.format_number(5, minimum_fraction_digits=0)
        assert factory.calls == 2

    def test_style_is_part_of_key(self, engine, factory):
        """Test that decimal and currency formatters are cached separately."""
        engine.format_number(5)
        engine.format_currency(5)
        assert factory.calls == 2

    def test_bounded_cache_evicts_least_recently_used(self, factory):
        """Test LRU eviction when a max size is configured."""
        engine = FormattingCacheEngine(
            cache=FormatterCache(max_size=2),
            formatter_factory=factory,
        )
        engine.format_number(1)                             # A
        engine.format_currency(1)                           # B
        engine.format_number(1)                             # A is now most recent
        engine.format_number(1, use_grouping=False)         # C evicts B

        info = engine.cache_info()
        assert info["size"] == 2
        assert info["evictions"] == 1

        engine.format_number(1)                             # A still cached
        assert factory.calls == 3
        engine.format_currency(1)                           # B rebuilt
        assert factory.calls == 4

    def test_concurrent_callers_construct_once(self, engine, factory):
        """Test that the engine lock serializes construction."""
        results = []

        def worker():
            results.append(engine.format_currency(1234.56))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == ["$1,234.56"] * 8
        assert factory.calls == 1


class TestErrors:
    """Tests for InvalidInputError and FormatConstructionError."""

    @pytest.mark.parametrize(
        "value",
        [float("nan"), float("inf"), float("-inf"), Decimal("NaN"), Decimal("Infinity")],
    )
    def test_non_finite_rejected(self, engine, factory, value):
        """Test that non-finite values fail before any cache access."""
        with pytest.raises(InvalidInputError):
            engine.format_number(value)
        assert engine.cache_size() == 0
        assert engine.cache_info()["misses"] == 0
        assert factory.calls == 0

    @pytest.mark.parametrize("value", ["12", None, True, [1]])
    def test_non_numbers_rejected(self, engine, value):
        """Test that strings, None and bools are not numbers."""
        with pytest.raises(InvalidInputError):
            engine.format_currency(value)
        assert engine.cache_size() == 0

    def test_invalid_input_is_type_error(self, engine):
        """Test the error hierarchy of InvalidInputError."""
        with pytest.raises(TypeError):
            engine.format_number(float("nan"))
        with pytest.raises(FormattingError):
            engine.format_number(float("nan"))

    def test_inconsistent_bounds(self, engine):
        """Test that min > max fails and leaves the cache unchanged."""
        engine.format_number(1)
        before = engine.cache_size()

        with pytest.raises(FormatConstructionError) as exc_info:
            engine.format_number(1, minimum_fraction_digits=5, maximum_fraction_digits=2)

        assert engine.cache_size() == before
        assert exc_info.value.key is not None
        assert "greater than" in exc_info.value.reason
        assert engine.format_number(1.5) == "1.5"

    def test_error_message_wraps_reason(self, engine):
        """Test the wrapped message format."""
        with pytest.raises(FormatConstructionError, match="^Failed to format currency: "):
            engine.format_number(1, maximum_fraction_digits=500)

    def test_failed_construction_not_memoized(self, engine, factory):
        """Test that a failing key is retried, not cached."""
        engine.set_locale("xx-YY")
        for _ in range(2):
            with pytest.raises(FormatConstructionError):
                engine.format_number(1)
        assert factory.calls == 2
        assert engine.cache_size() == 0

    def test_bad_locale_fails_lazily(self, engine):
        """Test that a malformed locale only fails on the next format call."""
        engine.set_locale("not a locale!!")
        with pytest.raises(FormatConstructionError):
            engine.format_number(1)

        engine.set_locale("en-US")
        assert engine.format_number(1) == "1"

    def test_bad_currency_fails_lazily(self, engine):
        """Test that a malformed currency fails currency and decimal calls."""
        engine.set_currency("EURO")
        with pytest.raises(FormatConstructionError):
            engine.format_currency(1)
        with pytest.raises(FormatConstructionError):
            engine.format_number(1)

    def test_invalid_option_type(self, engine):
        """Test that non-integer digit bounds are construction errors."""
        with pytest.raises(FormatConstructionError) as exc_info:
            engine.format_number(1, minimum_fraction_digits="2")
        assert exc_info.value.key is None
        assert engine.cache_size() == 0

    def test_invalid_style(self, engine):
        """Test that an unknown style is a construction error."""
        with pytest.raises(FormatConstructionError):
            engine.format_number(1, style="percent")

    def test_construction_error_is_value_error(self, engine):
        """Test the error hierarchy of FormatConstructionError."""
        with pytest.raises(ValueError):
            engine.format_number(1, maximum_fraction_digits=-1)

    def test_huge_int_formats(self, engine):
        """Test that an int too large for float is still a valid input."""
        formatted = engine.format_number(10**400)
        assert formatted.replace(",", "") == "1" + "0" * 400

    def test_fraction_is_invalid_input(self, engine, factory):
        """Test that non-int/float/Decimal numbers are rejected up front."""
        with pytest.raises(InvalidInputError):
            engine.format_number(Fraction(1, 3))
        assert factory.calls == 0
        assert engine.cache_size() == 0

    def test_huge_decimal_is_not_a_construction_error(self, engine, factory):
        """Test that a large finite Decimal formats on miss and on hit."""
        expected = "$" + format(10**2000, ",") + ".00"
        assert engine.format_currency(Decimal("1e2000")) == expected
        assert engine.format_currency(Decimal("1e2000")) == expected
        assert factory.calls == 1

    def test_unrenderable_value_is_invalid_input(self, store):
        """Test that a value the formatter cannot render is not blamed on options."""

        class RejectingFormatter:
            def format(self, value):
                raise UnformattableValueError("cannot render")

        engine = FormattingCacheEngine(
            bridge=PreferenceStoreBridge(store),
            formatter_factory=lambda locale, **options: RejectingFormatter(),
        )
        with pytest.raises(InvalidInputError):
            engine.format_number(1)
        assert engine.cache_size() == 0
