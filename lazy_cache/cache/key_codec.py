"""Key derivation for queries and fetched data."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

D = TypeVar("D")
Q = TypeVar("Q")
M = TypeVar("M")

# Called as data_to_key(datum) without metadata, data_to_key(datum, meta) with it
DataToKey = Callable[..., str]


@dataclass(frozen=True, slots=True)
class KeyCodec(Generic[D, Q, M]):
    """Maps queries and data to the cache key they share.

    Both functions must be pure and deterministic. Two queries with the same
    key are treated as the same query, and `data_to_key` must reproduce that
    key from the datum (and its metadata) alone.
    """

    query_to_key: Callable[[Q], str]
    data_to_key: DataToKey

    def query_key(self, query: Q) -> str:
        return self.query_to_key(query)

    def data_key(self, datum: D, meta: M | None = None) -> str:
        if meta is None:
            return self.data_to_key(datum)
        return self.data_to_key(datum, meta)
