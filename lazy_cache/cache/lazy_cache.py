"""Lazy, batched, deduplicating read-through cache."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

from lazy_cache.cache.debouncer import AccumulatingDebouncer
from lazy_cache.cache.entries import CacheEntry, FetchResult, is_augmented, unpack_augmented
from lazy_cache.cache.key_codec import DataToKey, KeyCodec
from lazy_cache.cache.pending import PendingSet
from lazy_cache.cache.snapshot import Snapshot
from lazy_cache.shared.config.settings import get_settings
from lazy_cache.shared.exceptions import ConfigurationError, FetchError, InvalidFetchResultError
from lazy_cache.shared.observability.correlation import (
    get_batch_id,
    new_batch_id,
    reset_batch_id,
    set_batch_id,
)

D = TypeVar("D")
Q = TypeVar("Q")
M = TypeVar("M")

Fetcher = Callable[..., Awaitable[FetchResult[Any, Any]]]
Observer = Callable[[Snapshot], None]


@dataclass(frozen=True, slots=True)
class CacheStats:
    entries: int
    pending: int
    fetches: int
    failed_fetches: int


class LazyCache(Generic[D, Q, M]):
    """Read-through cache that batches point queries into bulk fetches.

    `get(query)` returns whatever is cached right now and queues the query.
    Queries queued within one debounce window are deduplicated by key and,
    minus keys already cached or in flight, handed to `fetch` as one batch
    together with the static context values given at construction.

    Results land in an immutable `Snapshot` that is replaced on every change.
    Keys the fetch did not return are recorded as confirmed absent
    (`CacheEntry.complete(None)`); a failed fetch records `CacheEntry.error()`
    for its keys. Failures are never raised to callers and never retried;
    `invalidate` makes a key fetchable again.

    Usage:
        cache = LazyCache(
            lambda q: q.id,
            lambda d, meta=None: d.id,
            fetch_profiles,
            api_client,
        )
        entry = cache.get(query)   # None until the batch lands
        await cache.join()
        entry = cache.peek(query)
    """

    def __init__(
        self,
        query_to_key: Callable[[Q], str],
        data_to_key: DataToKey,
        fetch: Fetcher,
        *static_context: Any,
        debounce_delay: float | None = None,
    ) -> None:
        if debounce_delay is None:
            debounce_delay = get_settings().debounce_delay
        elif debounce_delay < 0:
            raise ConfigurationError(f"debounce_delay must be >= 0, got {debounce_delay}")

        self._codec: KeyCodec[D, Q, M] = KeyCodec(query_to_key, data_to_key)
        self._fetch = fetch
        self._static_context = static_context

        self._lock = threading.RLock()
        self._snapshot = Snapshot()
        self._pending = PendingSet()
        self._observers: list[Observer] = []
        self._tasks: set[asyncio.Task[bool]] = set()
        self._fetches = 0
        self._failed_fetches = 0

        self._debouncer: AccumulatingDebouncer[dict[str, Q], Q] = AccumulatingDebouncer(
            flush=self._schedule_populate,
            accumulate=self._accumulate_query,
            init_accumulator=dict,
            delay=debounce_delay,
        )

    # ============================================
    # Read surface
    # ============================================

    @property
    def snapshot(self) -> Snapshot:
        """Current snapshot. A new object after every change."""
        return self._snapshot

    @property
    def debounce_delay(self) -> float:
        return self._debouncer.delay

    @property
    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._snapshot),
                pending=len(self._pending),
                fetches=self._fetches,
                failed_fetches=self._failed_fetches,
            )

    def peek(self, query: Q) -> CacheEntry[D, M] | None:
        """Return the cached entry for `query` without scheduling a fetch."""
        return self._snapshot.get(self._codec.query_key(query))

    def get(self, query: Q) -> CacheEntry[D, M] | None:
        """Return the cached entry for `query` and queue it for fetching.

        Must be called from a running event loop. Cached or in-flight keys
        are filtered out when the batch flushes, so calling this repeatedly
        is cheap.
        """
        self._debouncer(query)
        return self.peek(query)

    def is_pending(self, query: Q) -> bool:
        """Whether a fetch covering `query` is in flight."""
        with self._lock:
            return self._codec.query_key(query) in self._pending

    # ============================================
    # Write surface
    # ============================================

    def add_data(self, data: Iterable[D], meta: M | None = None) -> None:
        """Store already-known data without fetching."""
        to_merge = {
            self._codec.data_key(datum, meta): CacheEntry.complete(datum, meta)
            for datum in data
        }
        self._update_cache(to_merge)

    def invalidate(self, *queries: Q) -> bool:
        """Drop the entries of `queries` so the next `get` fetches them again."""
        keys = [self._codec.query_key(query) for query in queries]
        removed = self._publish(lambda current: current.without(keys))
        if removed:
            logger.debug(f"Lazy cache invalidated {len(keys)} keys")
        return removed

    def clear(self) -> None:
        """Drop every entry. Fetches already in flight still land."""
        if self._publish(lambda current: Snapshot() if current else current):
            logger.debug("Lazy cache cleared")

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Call `callback(snapshot)` after every change. Returns an unsubscribe function."""
        with self._lock:
            self._observers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return unsubscribe

    # ============================================
    # Scheduling
    # ============================================

    def flush(self) -> bool:
        """Close the current debounce window now instead of waiting for the timer."""
        return self._debouncer.flush_now()

    async def join(self) -> None:
        """Flush queued queries and wait until every in-flight fetch has settled."""
        while True:
            self._debouncer.flush_now()
            in_flight = [task for task in self._tasks if not task.done()]
            if not in_flight:
                return
            await asyncio.gather(*in_flight)

    def _accumulate_query(self, batch: dict[str, Q], query: Q) -> dict[str, Q]:
        batch[self._codec.query_key(query)] = query
        return batch

    def _schedule_populate(self, batch: dict[str, Q]) -> None:
        queries = list(batch.values())
        task = asyncio.get_running_loop().create_task(self._populate(queries))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ============================================
    # Fetch orchestration
    # ============================================

    async def _populate(self, queries: Sequence[Q]) -> bool:
        claimed = self._claim_missing(queries)
        if not claimed:
            logger.debug(
                f"Lazy cache batch of {len(queries)} queries already covered",
                event="lazy_cache_batch_skipped",
            )
            return False

        keys = list(claimed)
        token = set_batch_id(new_batch_id())
        try:
            with self._lock:
                self._fetches += 1
            try:
                result = await self._fetch(list(claimed.values()), *self._static_context)
                self._put_data(keys, result)
            except Exception as exc:
                self._mark_error(keys, exc)
                return False
            logger.info(
                f"Lazy cache fetched {len(keys)} keys",
                event="lazy_cache_fetch",
                batchId=get_batch_id(),
                keyCount=len(keys),
            )
            return True
        finally:
            self._unmark_pending(keys)
            reset_batch_id(token)

    def _claim_missing(self, queries: Sequence[Q]) -> dict[str, Q]:
        """Select queries neither cached nor pending, and mark them pending."""
        with self._lock:
            snapshot = self._snapshot
            claimed: dict[str, Q] = {}
            for query in queries:
                key = self._codec.query_key(query)
                if key not in snapshot and key not in self._pending:
                    claimed[key] = query
            self._pending.mark(claimed)
        return claimed

    def _unmark_pending(self, keys: Iterable[str]) -> None:
        with self._lock:
            self._pending.unmark(keys)

    def _put_data(self, keys: Sequence[str], result: FetchResult[D, M]) -> None:
        if result is None or isinstance(result, (str, bytes, Mapping)) or not isinstance(result, Iterable):
            raise InvalidFetchResultError(
                f"fetch returned {type(result).__name__}, expected a sequence of data or groups",
                keys,
            )

        to_merge: dict[str, CacheEntry[D, M]] = {}
        for element in result:
            if is_augmented(element):
                items, meta = unpack_augmented(element)
                for datum in items:
                    to_merge[self._codec.data_key(datum, meta)] = CacheEntry.complete(datum, meta)
            else:
                to_merge[self._codec.data_key(element)] = CacheEntry.complete(element)

        # Queried keys the fetch returned nothing for are confirmed absent
        for key in keys:
            if key not in to_merge:
                to_merge[key] = CacheEntry.complete(None)

        self._update_cache(to_merge)

    def _mark_error(self, keys: Sequence[str], exc: Exception) -> None:
        with self._lock:
            self._failed_fetches += 1
        if isinstance(exc, FetchError):
            failure = exc
        else:
            failure = FetchError(f"{type(exc).__name__}: {exc}", keys)
            failure.__cause__ = exc
        # bind, not kwargs: the message embeds caller text that may contain braces
        logger.bind(
            event="lazy_cache_fetch_failed",
            batchId=get_batch_id(),
            keyCount=len(keys),
        ).warning(f"Lazy cache fetch failed for {len(keys)} keys: {failure}")
        # Keys filled by add_data while the fetch was in flight keep their data
        error = CacheEntry.error()
        self._update_cache({key: error for key in keys}, only_unset=True)

    # ============================================
    # Publication
    # ============================================

    def _update_cache(
        self,
        to_merge: Mapping[str, CacheEntry[D, M]],
        only_unset: bool = False,
    ) -> bool:
        if not to_merge:
            return False

        def build(current: Snapshot) -> Snapshot:
            if only_unset:
                return current.merge({k: v for k, v in to_merge.items() if k not in current})
            return current.merge(to_merge)

        return self._publish(build)

    def _publish(self, build: Callable[[Snapshot], Snapshot]) -> bool:
        """Swap in `build(current)` atomically and notify observers if it changed."""
        with self._lock:
            current = self._snapshot
            updated = build(current)
            if updated is current:
                return False
            self._snapshot = updated
            observers = list(self._observers)

        for callback in observers:
            try:
                callback(updated)
            except Exception:
                logger.exception("Lazy cache observer failed")
        return True
