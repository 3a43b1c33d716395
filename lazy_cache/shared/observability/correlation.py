"""Batch ID context for correlating one populate call across layers."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_batch_id_ctx: ContextVar[str] = ContextVar("lazy_cache_batch_id", default="")


def new_batch_id() -> str:
    """Generate a short random batch ID."""
    return uuid.uuid4().hex[:12]


def get_batch_id() -> str:
    """Get the batch ID of the populate call currently running, or ``""``."""
    return _batch_id_ctx.get()


def set_batch_id(batch_id: str) -> Token[str]:
    """Set current batch ID and return reset token."""
    return _batch_id_ctx.set(batch_id)


def reset_batch_id(token: Token[str]) -> None:
    """Reset batch ID context with token from `set_batch_id`."""
    _batch_id_ctx.reset(token)
