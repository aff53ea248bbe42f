"""
Number Formatter

A locale-bound number formatter built on Babel's CLDR data.

Constructing a NumberFormatter is the expensive step: the locale is
parsed, the CLDR pattern is looked up and every option is resolved
against the locale and currency. Formatting afterwards only applies the
prepared pattern, which is why instances are worth caching.

Option resolution follows Intl.NumberFormat:
- Decimal style shows 0-3 fraction digits by default
- Currency style shows the currency's own precision (USD 2, JPY 0)
- A lone minimum raises the maximum, a lone maximum lowers the minimum
- An explicit minimum above an explicit maximum is rejected
- Ties round away from zero

Babel is used instead of the `locale` module, which depends on the
platform and mutates process-wide state.
"""

import decimal
import math
import re
from decimal import Decimal
from typing import Any, Optional, Union

from babel import Locale, UnknownLocaleError
from babel.numbers import NumberPattern, get_currency_precision, parse_pattern

from currency_formatter.models.formatting import FormatStyle


# Intl.NumberFormat accepts fraction digits in this range
MIN_FRACTION_DIGITS = 0
MAX_FRACTION_DIGITS = 100

# Default maximum fraction digits for decimal style
DECIMAL_MAX_FRACTION_DEFAULT = 3

_CURRENCY_CODE = re.compile(r"[A-Za-z]{3}")

Number = Union[int, float, Decimal]


def normalize_locale(locale_code: str) -> str:
    """
    Convert a BCP-47 tag to the POSIX form Babel parses.

    >>> normalize_locale("en-US")
    'en_US'
    """
    return locale_code.replace("-", "_")


def to_bcp47(locale: Locale) -> str:
    """Render a Babel locale as a BCP-47 tag (e.g. 'fr-FR')."""
    return str(locale).replace("_", "-")


class NumberFormatter:
    """
    Immutable formatter for one locale/currency/options combination.

    Raises FormatterConfigError from the constructor if the locale, the
    currency or the digit bounds are unusable.

    Examples:
        >>> NumberFormatter("en-US").format(1234.56)
        '1,234.56'

        >>> NumberFormatter("en-US", style="currency", currency="USD").format(1234.56)
        '$1,234.56'

        >>> NumberFormatter("en-US", maximum_fraction_digits=0).format(2.5)
        '3'
    """

    def __init__(
        self,
        locale: str,
        *,
        style: Optional[Union[FormatStyle, str]] = None,
        currency: Optional[str] = None,
        minimum_fraction_digits: Optional[int] = None,
        maximum_fraction_digits: Optional[int] = None,
        use_grouping: bool = True,
    ):
        self._locale = self._parse_locale(locale)
        self._style = self._parse_style(style)
        self._currency = self._parse_currency(currency, self._style)
        self._use_grouping = bool(use_grouping)

        minimum, maximum = self._resolve_fraction_digits(
            minimum_fraction_digits,
            maximum_fraction_digits,
        )
        self._minimum_fraction_digits = minimum
        self._maximum_fraction_digits = maximum
        self._pattern = self._build_pattern()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_locale(locale_code: str) -> Locale:
        if not isinstance(locale_code, str) or not locale_code.strip():
            raise FormatterConfigError(f"Incorrect locale information provided: {locale_code!r}")
        try:
            return Locale.parse(normalize_locale(locale_code.strip()))
        except UnknownLocaleError as e:
            raise FormatterConfigError(f"Unsupported locale {locale_code!r}: {e}") from e
        except (ValueError, TypeError) as e:
            raise FormatterConfigError(f"Invalid locale tag {locale_code!r}: {e}") from e

    @staticmethod
    def _parse_style(style: Optional[Union[FormatStyle, str]]) -> FormatStyle:
        if style is None:
            return FormatStyle.DECIMAL
        try:
            return FormatStyle(style)
        except ValueError as e:
            raise FormatterConfigError(f"Invalid style {style!r}") from e

    @staticmethod
    def _parse_currency(currency: Optional[str], style: FormatStyle) -> Optional[str]:
        if currency is None:
            if style is FormatStyle.CURRENCY:
                raise FormatterConfigError("Currency code is required with currency style")
            return None
        # Checked for every style, not only currency
        if not isinstance(currency, str) or not _CURRENCY_CODE.fullmatch(currency):
            raise FormatterConfigError(f"Invalid currency code : {currency}")
        return currency.upper()

    @staticmethod
    def _check_digits(name: str, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise FormatterConfigError(f"{name} must be an integer, got {value!r}")
        if not MIN_FRACTION_DIGITS <= value <= MAX_FRACTION_DIGITS:
            raise FormatterConfigError(f"{name} value is out of range: {value}")
        return value

    def _default_fraction_digits(self) -> tuple[int, int]:
        if self._style is FormatStyle.CURRENCY:
            digits = get_currency_precision(self._currency)
            return digits, digits
        return 0, DECIMAL_MAX_FRACTION_DEFAULT

    def _resolve_fraction_digits(
        self,
        minimum: Optional[int],
        maximum: Optional[int],
    ) -> tuple[int, int]:
        minimum = self._check_digits("minimumFractionDigits", minimum)
        maximum = self._check_digits("maximumFractionDigits", maximum)
        default_min, default_max = self._default_fraction_digits()

        if minimum is None and maximum is None:
            return default_min, default_max
        if maximum is None:
            return minimum, max(default_max, minimum)
        if minimum is None:
            return min(default_min, maximum), maximum
        if minimum > maximum:
            raise FormatterConfigError(
                f"minimumFractionDigits ({minimum}) is greater than "
                f"maximumFractionDigits ({maximum})"
            )
        return minimum, maximum

    def _build_pattern(self) -> NumberPattern:
        if self._style is FormatStyle.CURRENCY:
            base = self._locale.currency_formats["standard"]
        else:
            base = self._locale.decimal_formats[None]

        # Fresh copy, the locale's pattern objects are shared
        pattern = parse_pattern(base.pattern)
        pattern.frac_prec = (self._minimum_fraction_digits, self._maximum_fraction_digits)
        return pattern

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format(self, value: Number) -> str:
        """
        Format a finite int, float or Decimal with this formatter's settings.

        Raises:
            UnformattableValueError: If the value cannot be rendered
        """
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise UnformattableValueError(f"Cannot format {type(value).__name__} value")

        if isinstance(value, float) and not math.isfinite(value):
            raise UnformattableValueError(f"Cannot format non-finite value {value!r}")
        if isinstance(value, Decimal) and not value.is_finite():
            raise UnformattableValueError(f"Cannot format non-finite value {value!r}")

        try:
            if isinstance(value, float):
                value = Decimal(str(value))
            elif isinstance(value, int):
                # No float round-trip, so ints of any size are exact
                value = Decimal(value)

            with decimal.localcontext() as ctx:
                ctx.prec = self._precision_for(value)
                ctx.rounding = decimal.ROUND_HALF_UP
                return self._pattern.apply(
                    value,
                    self._locale,
                    currency=self._currency if self._style is FormatStyle.CURRENCY else None,
                    currency_digits=False,
                    group_separator=self._use_grouping,
                )
        except (decimal.InvalidOperation, OverflowError, ValueError, KeyError) as e:
            raise UnformattableValueError(f"Formatting {value} failed: {e}") from e

    def _precision_for(self, value: Decimal) -> int:
        """Significant digits needed to quantize value without loss."""
        integer_digits = max(value.adjusted() + 1, 1)
        return max(decimal.getcontext().prec, integer_digits + self._maximum_fraction_digits + 2)

    def resolved_options(self) -> dict[str, Any]:
        """The options actually in effect, after defaults were applied."""
        options: dict[str, Any] = {
            "locale": to_bcp47(self._locale),
            "numbering_system": "latn",
            "style": self._style.value,
            "minimum_fraction_digits": self._minimum_fraction_digits,
            "maximum_fraction_digits": self._maximum_fraction_digits,
            "use_grouping": self._use_grouping,
        }
        if self._style is FormatStyle.CURRENCY:
            options["currency"] = self._currency
        return options

    def __repr__(self) -> str:
        return f"NumberFormatter({self.resolved_options()!r})"


class FormatterConfigError(ValueError):
    """The formatter cannot be built with the given settings."""
    pass


class UnformattableValueError(ValueError):
    """The value itself cannot be rendered, whatever the settings."""
    pass
