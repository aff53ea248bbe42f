"""Configuration package."""

from currency_formatter.config.settings import (
    AppSettings,
    FormatterSettings,
    PreferenceBackend,
    PreferenceSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "FormatterSettings",
    "PreferenceBackend",
    "PreferenceSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
