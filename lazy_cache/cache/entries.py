"""Cache entry and fetch result types."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

from lazy_cache.shared.exceptions import InvalidFetchResultError

D = TypeVar("D")
M = TypeVar("M")

EntryStatus = Literal["complete", "error"]


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[D, M]):
    """State of one cache key.

    - `complete` with data: the datum, plus shared metadata when it arrived
      in an augmented group
    - `complete` with `data=None`: queried and confirmed absent
    - `error`: the last fetch covering this key failed
    """

    status: EntryStatus
    data: D | None = None
    meta: M | None = None

    @classmethod
    def complete(cls, data: D | None, meta: M | None = None) -> CacheEntry[D, M]:
        return cls(status="complete", data=data, meta=meta)

    @classmethod
    def error(cls) -> CacheEntry[D, M]:
        return cls(status="error")

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    @property
    def is_absent(self) -> bool:
        """True for a confirmed-absent entry."""
        return self.status == "complete" and self.data is None


@dataclass(frozen=True, slots=True)
class AugmentedGroup(Generic[D, M]):
    """Fetch result element: several data items sharing one metadata value."""

    data: list[D]
    meta: M


# A fetch returns either plain data items or augmented groups. Besides
# AugmentedGroup, a mapping with a "meta" key or any object exposing both
# `data` and `meta` attributes is read as a group.
FetchResult = Iterable[Union[D, AugmentedGroup[D, M], Mapping[str, Any]]]


def is_augmented(element: Any) -> bool:
    """Whether a fetch result element carries shared metadata."""
    if isinstance(element, AugmentedGroup):
        return True
    if isinstance(element, Mapping):
        return "meta" in element
    return hasattr(element, "meta") and hasattr(element, "data")


def unpack_augmented(element: Any) -> tuple[Iterable[Any], Any]:
    """Return ``(items, meta)`` of an augmented result element.

    Raises:
        InvalidFetchResultError: the group's `data` is missing or not a
            collection of items
    """
    if isinstance(element, Mapping):
        items, meta = element.get("data"), element["meta"]
    else:
        items, meta = element.data, element.meta
    if items is None or isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
        raise InvalidFetchResultError(
            f"augmented group has {type(items).__name__} data, expected a sequence of items"
        )
    return items, meta
