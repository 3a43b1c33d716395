"""Keys awaiting a fetch result."""

from __future__ import annotations

from collections.abc import Iterable


class PendingSet:
    """Keys with a fetch in flight.

    Not synchronized on its own; the owning cache mutates it under its lock.
    """

    __slots__ = ("_keys",)

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def mark(self, keys: Iterable[str]) -> None:
        self._keys.update(keys)

    def unmark(self, keys: Iterable[str]) -> None:
        self._keys.difference_update(keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
