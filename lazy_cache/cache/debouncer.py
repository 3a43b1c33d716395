"""Accumulating debounce on the asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

from lazy_cache.shared.exceptions import ConfigurationError, SchedulingError

A = TypeVar("A")
T = TypeVar("T")


class AccumulatingDebouncer(Generic[A, T]):
    """Fold every call made within one window into a single flush.

    The first call opens a window: the accumulator is seeded with
    `init_accumulator()` and a timer of `delay` seconds starts. Later calls
    fold their item in with `accumulate(acc, item)` without restarting the
    timer. When the timer fires, `flush(acc)` runs exactly once and the
    accumulator is discarded.

    A delay of 0 coalesces everything called before the next loop tick.
    """

    def __init__(
        self,
        flush: Callable[[A], None],
        accumulate: Callable[[A, T], A],
        init_accumulator: Callable[[], A],
        delay: float = 0.0,
    ) -> None:
        if delay < 0:
            raise ConfigurationError(f"delay must be >= 0, got {delay}")
        self._flush = flush
        self._accumulate = accumulate
        self._init_accumulator = init_accumulator
        self._delay = delay
        self._accumulator: A | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a window is open."""
        return self._timer is not None

    def __call__(self, item: T) -> None:
        if self._timer is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as exc:
                raise SchedulingError(
                    "debounced calls must be made from a running event loop"
                ) from exc
            self._accumulator = self._init_accumulator()
            self._timer = loop.call_later(self._delay, self._fire)
            logger.debug(f"Debounce window opened ({self._delay}s)")
        self._accumulator = self._accumulate(self._accumulator, item)

    def flush_now(self) -> bool:
        """Close the open window immediately. Returns False if none was open."""
        if self._timer is None:
            return False
        self._timer.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the open window without flushing."""
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._accumulator = None

    def _fire(self) -> None:
        accumulator = self._accumulator
        self._timer = None
        self._accumulator = None
        self._flush(accumulator)
