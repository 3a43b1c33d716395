"""Lazy, batched, deduplicating read-through cache."""

from lazy_cache.cache import (
    AugmentedGroup,
    CacheEntry,
    CacheStats,
    LazyCache,
    Snapshot,
)
from lazy_cache.shared.exceptions import (
    ConfigurationError,
    FetchError,
    InvalidFetchResultError,
    LazyCacheError,
    SchedulingError,
)

__version__ = "0.1.0"

__all__ = [
    "AugmentedGroup",
    "CacheEntry",
    "CacheStats",
    "LazyCache",
    "Snapshot",
    "LazyCacheError",
    "ConfigurationError",
    "SchedulingError",
    "FetchError",
    "InvalidFetchResultError",
]
