"""Observability helpers shared across layers."""

from lazy_cache.shared.observability.correlation import (
    get_batch_id,
    new_batch_id,
    reset_batch_id,
    set_batch_id,
)

__all__ = [
    "get_batch_id",
    "new_batch_id",
    "set_batch_id",
    "reset_batch_id",
]
