"""Unit tests for CacheEntry and result shape detection."""

from __future__ import annotations

import dataclasses
from typing import NamedTuple

import pytest

from lazy_cache.cache.entries import AugmentedGroup, CacheEntry, is_augmented, unpack_augmented
from lazy_cache.shared.exceptions import InvalidFetchResultError


def test_complete_entry_carries_data_and_meta() -> None:
    entry = CacheEntry.complete({"id": "a"}, meta="study")

    assert entry.is_complete
    assert not entry.is_error
    assert not entry.is_absent
    assert entry.data == {"id": "a"}
    assert entry.meta == "study"


def test_complete_none_is_confirmed_absent() -> None:
    entry = CacheEntry.complete(None)

    assert entry.is_complete
    assert entry.is_absent


def test_error_entry_has_no_data() -> None:
    entry = CacheEntry.error()

    assert entry.is_error
    assert not entry.is_absent
    assert entry.data is None
    assert entry.meta is None


def test_entries_are_frozen() -> None:
    entry = CacheEntry.complete(1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.data = 2  # type: ignore[misc]


def test_is_augmented_detects_both_group_shapes() -> None:
    assert is_augmented(AugmentedGroup(data=[1, 2], meta="m"))
    assert is_augmented({"data": [1, 2], "meta": "m"})
    assert not is_augmented({"id": "a", "value": 1})
    assert not is_augmented(7)


def test_is_augmented_accepts_objects_with_data_and_meta() -> None:
    class StudyGroup(NamedTuple):
        data: list[str]
        meta: str

    group = StudyGroup(data=["TP53"], meta="study1")

    assert is_augmented(group)
    assert unpack_augmented(group) == (["TP53"], "study1")


@pytest.mark.parametrize(
    "element",
    [
        {"meta": "m"},
        {"meta": "m", "data": None},
        {"meta": "m", "data": "ab"},
        {"meta": "m", "data": 3},
        AugmentedGroup(data=None, meta="m"),  # type: ignore[arg-type]
    ],
)
def test_unpack_augmented_rejects_unusable_data(element: object) -> None:
    with pytest.raises(InvalidFetchResultError):
        unpack_augmented(element)
