"""
Currency Formatter - Source Package

Locale- and currency-aware number formatting for interactive applications,
with user-selectable locale and currency that persist across sessions.

DESIGN PRINCIPLES:
1. Formatter construction is expensive, so formatters are memoized
2. A cache key carries every parameter that affects formatter identity
3. Invalid locales and currencies fail loudly at format time
4. Persistence is best-effort and never breaks formatting
5. One explicit session object, no hidden globals
"""

from currency_formatter.formatting import (
    FormatConstructionError,
    FormattingCacheEngine,
    FormattingError,
    InvalidInputError,
)
from currency_formatter.session import FormatterSession, create_formatter_session

__version__ = "1.0.0"
__author__ = "Currency Formatter Team"

__all__ = [
    "FormatConstructionError",
    "FormatterSession",
    "FormattingCacheEngine",
    "FormattingError",
    "InvalidInputError",
    "create_formatter_session",
]
