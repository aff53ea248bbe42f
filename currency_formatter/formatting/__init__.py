"""
Formatting Package

The formatting cache engine, its cache, and the Babel-backed formatter.
"""

from currency_formatter.formatting.number_formatter import (
    FormatterConfigError,
    NumberFormatter,
    UnformattableValueError,
)
from currency_formatter.formatting.cache import FormatterCache
from currency_formatter.formatting.engine import (
    FormatConstructionError,
    FormattingCacheEngine,
    FormattingError,
    InvalidInputError,
)

__all__ = [
    # Engine
    "FormattingCacheEngine",
    "FormatterCache",
    "NumberFormatter",
    # Exceptions
    "FormatConstructionError",
    "FormatterConfigError",
    "FormattingError",
    "InvalidInputError",
    "UnformattableValueError",
]
