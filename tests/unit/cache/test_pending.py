"""Unit tests for PendingSet."""

from __future__ import annotations

from lazy_cache.cache.pending import PendingSet


def test_mark_and_unmark() -> None:
    pending = PendingSet()

    pending.mark(["a", "b"])
    assert "a" in pending
    assert len(pending) == 2

    pending.unmark(["a", "c"])
    assert "a" not in pending
    assert "b" in pending
    assert len(pending) == 1


def test_marking_twice_keeps_one_entry() -> None:
    pending = PendingSet()

    pending.mark(["a"])
    pending.mark(["a"])
    pending.unmark(["a"])

    assert "a" not in pending
    assert len(pending) == 0
