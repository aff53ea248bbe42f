"""
JSON File Preference Storage

DESIGN DECISION: A single small JSON object on disk is enough to carry
two strings between visits because:
1. No database or service setup required
2. Users can inspect and edit the file by hand
3. Writes can be made atomic with a rename

TRADEOFFS:
- One writer per file (we own the file for the session)
- Whole file rewritten on every change (it holds two keys)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from currency_formatter.services.preferences.interface import (
    PreferenceReadError,
    PreferenceStoreInterface,
    PreferenceWriteError,
)


class JSONFilePreferenceStore(PreferenceStoreInterface):
    """
    Preferences stored as one JSON object in a file.

    A missing file reads as empty. Writes go to a temporary file in the
    same directory and are renamed into place.
    """

    def __init__(self, path: Union[str, Path], write_attempts: int = 3):
        self._path = Path(path).expanduser()
        self._write_attempts = write_attempts

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Load the whole file."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise PreferenceReadError(f"Failed to read {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PreferenceReadError(f"Corrupt preference file {self._path}: {e}")

        if not isinstance(data, dict):
            raise PreferenceReadError(
                f"Preference file {self._path} must hold a JSON object"
            )

        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write_all(self, data: dict[str, str]) -> None:
        """Atomically replace the file contents."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        writer = retry(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(self._set_once)

        try:
            writer(key, value)
        except OSError as e:
            raise PreferenceWriteError(
                f"Failed to write {key!r} to {self._path}: {e}"
            )

    def _set_once(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
