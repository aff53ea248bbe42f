"""
Core Data Models for Currency Formatter

These models define the values flowing between the caller, the
formatting cache and the preference store.

DESIGN DECISION: Cache keys are frozen Pydantic models rather than
joined strings. Joining with a separator lets an omitted option and an
explicit one render to the same text; a tuple of typed fields cannot.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FormatStyle(str, Enum):
    """Formatting style understood by the number formatter."""
    CURRENCY = "currency"
    DECIMAL = "decimal"


class PreferenceKind(str, Enum):
    """
    The two user preferences that persist between visits.

    The values double as the keys in durable storage.
    """
    LOCALE = "locale"
    CURRENCY = "currency"


# =============================================================================
# FORMAT OPTIONS & CACHE KEY
# =============================================================================

class FormatOptions(BaseModel):
    """
    Options that affect how a number is rendered.

    None means "not given"; the formatter then resolves a default for
    the locale, currency and style in use.
    """
    model_config = ConfigDict(frozen=True)

    minimum_fraction_digits: Optional[StrictInt] = Field(
        default=None,
        description="Minimum number of fraction digits"
    )
    maximum_fraction_digits: Optional[StrictInt] = Field(
        default=None,
        description="Maximum number of fraction digits"
    )
    style: Optional[FormatStyle] = Field(
        default=None,
        description="Formatting style (decimal when omitted)"
    )
    use_grouping: StrictBool = Field(
        default=True,
        description="Whether to render grouping separators"
    )


class FormatterKey(BaseModel):
    """
    Identity of a cached formatter.

    Two format calls resolve to the same key exactly when all six
    fields are equal. Currency is part of the key even for decimal
    style.
    """
    model_config = ConfigDict(frozen=True)

    locale: str
    currency: str
    minimum_fraction_digits: Optional[int] = None
    maximum_fraction_digits: Optional[int] = None
    style: Optional[FormatStyle] = None
    use_grouping: bool = True

    @classmethod
    def compose(
        cls,
        state: "PreferenceState",
        options: FormatOptions,
    ) -> "FormatterKey":
        """Build the key for the current preferences and these options."""
        return cls(
            locale=state.locale,
            currency=state.currency,
            minimum_fraction_digits=options.minimum_fraction_digits,
            maximum_fraction_digits=options.maximum_fraction_digits,
            style=options.style,
            use_grouping=options.use_grouping,
        )

    def as_tuple(self) -> tuple:
        """Key fields in their fixed order, for logging and debugging."""
        return (
            self.locale,
            self.currency,
            self.minimum_fraction_digits,
            self.maximum_fraction_digits,
            self.style.value if self.style else None,
            self.use_grouping,
        )


# =============================================================================
# PREFERENCES
# =============================================================================

class PreferenceState(BaseModel):
    """
    The current formatting context.

    Any string is accepted here. Whether the platform formatter can use
    it is only discovered when formatting.
    """
    model_config = ConfigDict(validate_assignment=True)

    locale: str = Field(
        default="en-US",
        description="BCP-47 locale tag"
    )
    currency: str = Field(
        default="USD",
        description="ISO 4217 currency code"
    )

    def get(self, kind: PreferenceKind) -> str:
        """Read one preference by kind."""
        return getattr(self, kind.value)
