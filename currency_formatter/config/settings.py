"""
Configuration Management for Currency Formatter

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Session defaults, cache sizing and the preference backend are all
visible in one place and validated at startup.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PreferenceBackend(str, Enum):
    """Where the user's locale/currency choice is kept between visits."""
    MEMORY = "memory"        # Lost when the process exits
    JSON_FILE = "json_file"  # Survives restarts


class FormatterSettings(BaseSettings):
    """Formatting defaults and cache sizing."""

    model_config = SettingsConfigDict(
        env_prefix="FORMATTER_",
        extra="ignore"
    )

    default_locale: str = Field(
        default="en-US",
        min_length=1,
        description="Locale used when no preference has been stored"
    )
    default_currency: str = Field(
        default="USD",
        min_length=1,
        description="Currency used when no preference has been stored"
    )
    cache_max_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum cached formatters (None = unbounded)"
    )


class PreferenceSettings(BaseSettings):
    """Durable preference storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PREFERENCES_",
        extra="ignore"
    )

    backend: PreferenceBackend = Field(
        default=PreferenceBackend.JSON_FILE,
        description="Preference storage backend"
    )
    file_path: str = Field(
        default=".preferences.json",
        description="Path of the JSON preference file"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a preference write is attempted"
    )

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """Warn if the parent directory doesn't exist (but don't fail - might be mounted later)."""
        parent = Path(v).expanduser().parent
        if not parent.exists():
            import warnings
            warnings.warn(
                f"Preference directory not found at {parent}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def formatter(self) -> FormatterSettings:
        return FormatterSettings()

    @property
    def preferences(self) -> PreferenceSettings:
        return PreferenceSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("formatter", "preferences", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
