"""
Abstract Preference Store Interface

DESIGN DECISION: We define an abstract interface for durable preference
storage. This allows us to:
1. Keep preferences in a JSON file for a single-user deployment
2. Use in-memory storage for testing
3. Swap in cookies, a database or a remote profile service later

The interface is intentionally tiny - two plain string values addressed
by fixed keys. No validation happens here.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PreferenceStoreInterface(ABC):
    """
    Abstract interface for durable key-value preference storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a stored value.

        Args:
            key: Preference key (e.g., 'locale')

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            PreferenceReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Preference key (e.g., 'currency')
            value: Value to store

        Raises:
            PreferenceWriteError: If the write fails
        """
        pass


class PreferenceStoreError(Exception):
    """Base exception for preference storage operations."""
    pass


class PreferenceReadError(PreferenceStoreError):
    """Stored preferences could not be read."""
    pass


class PreferenceWriteError(PreferenceStoreError):
    """A preference could not be written."""
    pass
