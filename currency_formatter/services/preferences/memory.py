"""In-memory preference storage, for tests and ephemeral sessions."""

from typing import Optional

from currency_formatter.services.preferences.interface import PreferenceStoreInterface


class InMemoryPreferenceStore(PreferenceStoreInterface):
    """Dictionary-backed store. Values live as long as the instance."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored."""
        return dict(self._values)
