from lazy_cache.cache.debouncer import AccumulatingDebouncer
from lazy_cache.cache.entries import AugmentedGroup, CacheEntry, FetchResult
from lazy_cache.cache.key_codec import KeyCodec
from lazy_cache.cache.lazy_cache import CacheStats, LazyCache
from lazy_cache.cache.pending import PendingSet
from lazy_cache.cache.snapshot import Snapshot

__all__ = [
    "AccumulatingDebouncer",
    "AugmentedGroup",
    "CacheEntry",
    "CacheStats",
    "FetchResult",
    "KeyCodec",
    "LazyCache",
    "PendingSet",
    "Snapshot",
]
