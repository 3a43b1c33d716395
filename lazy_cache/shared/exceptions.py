"""
Custom exceptions

Exception hierarchy for the lazy batch cache.
"""

from __future__ import annotations

from collections.abc import Sequence


class LazyCacheError(Exception):
    """Base exception for the package"""

    pass


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(LazyCacheError):
    """Invalid settings or constructor arguments"""

    pass


# =============================================================================
# Scheduling
# =============================================================================


class SchedulingError(LazyCacheError):
    """Debounced work was requested outside a running event loop"""

    pass


# =============================================================================
# Fetching
# =============================================================================


class FetchError(LazyCacheError):
    """A batch fetch failed; every key of the batch is recorded as an error entry."""

    def __init__(self, message: str, keys: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.keys: tuple[str, ...] = tuple(keys)


class InvalidFetchResultError(FetchError):
    """The fetch collaborator returned a result that cannot be merged"""

    pass
