"""Immutable keyed view of cache entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from lazy_cache.cache.entries import CacheEntry


class Snapshot(Mapping[str, CacheEntry[Any, Any]]):
    """Read-only mapping of cache key to entry.

    Every change produces a new Snapshot, so observers detect updates by
    identity (`new is not old`). Entries are shared between snapshots;
    only the key table is copied.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, CacheEntry[Any, Any]] | None = None) -> None:
        self._entries: dict[str, CacheEntry[Any, Any]] = dict(entries or {})

    @classmethod
    def _wrap(cls, entries: dict[str, CacheEntry[Any, Any]]) -> Snapshot:
        snapshot = cls.__new__(cls)
        snapshot._entries = entries
        return snapshot

    def __getitem__(self, key: str) -> CacheEntry[Any, Any]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Snapshot({self._entries!r})"

    def merge(self, updates: Mapping[str, CacheEntry[Any, Any]]) -> Snapshot:
        """Return a snapshot with `updates` overwriting existing keys.

        An empty `updates` returns this same snapshot.
        """
        if not updates:
            return self
        merged = dict(self._entries)
        merged.update(updates)
        return Snapshot._wrap(merged)

    def without(self, keys: Iterable[str]) -> Snapshot:
        """Return a snapshot lacking `keys`; unchanged if none were present."""
        drop = {key for key in keys if key in self._entries}
        if not drop:
            return self
        return Snapshot._wrap(
            {key: entry for key, entry in self._entries.items() if key not in drop}
        )
