"""
Preference Services Package

Provides the abstract store interface, concrete stores, and the bridge
that connects a formatting session to durable storage.
"""

from currency_formatter.services.preferences.interface import (
    PreferenceReadError,
    PreferenceStoreError,
    PreferenceStoreInterface,
    PreferenceWriteError,
)
from currency_formatter.services.preferences.memory import InMemoryPreferenceStore
from currency_formatter.services.preferences.json_file import JSONFilePreferenceStore
from currency_formatter.services.preferences.bridge import PreferenceStoreBridge

__all__ = [
    # Interfaces
    "PreferenceStoreInterface",
    # Exceptions
    "PreferenceReadError",
    "PreferenceStoreError",
    "PreferenceWriteError",
    # Implementations
    "InMemoryPreferenceStore",
    "JSONFilePreferenceStore",
    # Bridge
    "PreferenceStoreBridge",
]
