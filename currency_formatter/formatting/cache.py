"""
Formatter Cache

Maps FormatterKey -> constructed formatter.

DESIGN DECISION: Entries are immutable and fully determined by their
key, so they never go stale. A locale or currency change simply makes
later calls use a different key; existing entries stay valid for the
combination they were built with.

By default nothing is ever evicted; growth is bounded by the option
combinations the application actually uses. Pass max_size to turn the
cache into an LRU for long-lived sessions. Eviction only costs a
rebuild, never a wrong result.
"""

from collections import OrderedDict
from typing import Any, Callable, Generic, Optional, TypeVar

from currency_formatter.models.formatting import FormatterKey


F = TypeVar("F")


class FormatterCache(Generic[F]):
    """
    Memoizes formatter construction by key.

    Not thread-safe by itself; the owning engine serializes access.
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        on_evict: Optional[Callable[[FormatterKey], None]] = None,
    ):
        if max_size is not None and max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._entries: "OrderedDict[FormatterKey, F]" = OrderedDict()
        self._max_size = max_size
        self._on_evict = on_evict

        self.hits = 0
        self.misses = 0
        self.constructions = 0
        self.evictions = 0

    @property
    def max_size(self) -> Optional[int]:
        return self._max_size

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: FormatterKey) -> bool:
        return key in self._entries

    def keys(self) -> list[FormatterKey]:
        """Cached keys, least recently used first."""
        return list(self._entries.keys())

    def lookup(self, key: FormatterKey) -> Optional[F]:
        """Return the cached formatter, counting a hit or a miss."""
        formatter = self._entries.get(key)
        if formatter is None:
            self.misses += 1
            return None

        self.hits += 1
        if self._max_size is not None:
            self._entries.move_to_end(key)
        return formatter

    def store(self, key: FormatterKey, formatter: F) -> None:
        """
        Record a newly constructed formatter.

        Only called after construction succeeded, so a failed build never
        leaves an entry behind.
        """
        self.constructions += 1
        self._entries[key] = formatter
        self._entries.move_to_end(key)

        if self._max_size is not None:
            while len(self._entries) > self._max_size:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                if self._on_evict is not None:
                    self._on_evict(evicted)

    def info(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "max_size": self._max_size,
            "hits": self.hits,
            "misses": self.misses,
            "constructions": self.constructions,
            "evictions": self.evictions,
        }
