"""Services package."""

from currency_formatter.services.preferences import (
    InMemoryPreferenceStore,
    JSONFilePreferenceStore,
    PreferenceReadError,
    PreferenceStoreBridge,
    PreferenceStoreError,
    PreferenceStoreInterface,
    PreferenceWriteError,
)

__all__ = [
    "InMemoryPreferenceStore",
    "JSONFilePreferenceStore",
    "PreferenceReadError",
    "PreferenceStoreBridge",
    "PreferenceStoreError",
    "PreferenceStoreInterface",
    "PreferenceWriteError",
]
