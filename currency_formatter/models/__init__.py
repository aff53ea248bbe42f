"""
Data Models Package

This package contains all Pydantic models used by the currency formatter.
"""

from currency_formatter.models.formatting import (
    FormatOptions,
    FormatStyle,
    FormatterKey,
    PreferenceKind,
    PreferenceState,
)

__all__ = [
    "FormatOptions",
    "FormatStyle",
    "FormatterKey",
    "PreferenceKind",
    "PreferenceState",
]
