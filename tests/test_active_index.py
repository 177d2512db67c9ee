"""Tests for the active-index state machine (clamped stepper, wrapped cards)."""
from __future__ import annotations

import pytest

from active_index import ActiveIndex


class TestClamped:
    def test_starts_at_first(self):
        assert ActiveIndex(4).index == 0

    def test_next_clamps_at_end(self):
        state = ActiveIndex(3)
        assert [state.next() for _ in range(4)] == [1, 2, 2, 2]

    def test_prev_clamps_at_start(self):
        state = ActiveIndex(3)
        assert state.prev() == 0

    def test_first_last(self):
        state = ActiveIndex(5)
        assert state.last() == 4
        assert state.first() == 0

    def test_neighbors(self):
        state = ActiveIndex(3)
        assert state.neighbors(0) == (0, 1)
        assert state.neighbors(2) == (1, 2)


class TestWrapped:
    def test_next_wraps(self):
        state = ActiveIndex(3, wrap=True)
        assert [state.next() for _ in range(4)] == [1, 2, 0, 1]

    def test_prev_wraps(self):
        state = ActiveIndex(3, wrap=True)
        assert state.prev() == 2

    def test_neighbors(self):
        state = ActiveIndex(3, wrap=True)
        assert state.neighbors(0) == (2, 1)
        assert state.neighbors(2) == (1, 0)

    def test_single_item(self):
        state = ActiveIndex(1, wrap=True)
        assert state.neighbors(0) == (0, 0)
        assert state.next() == 0


class TestActivate:
    def test_activate(self):
        state = ActiveIndex(3)
        assert state.activate(2) == 2
        assert state.is_active(2)
        assert not state.is_active(0)

    @pytest.mark.parametrize("index", [-1, 3])
    def test_out_of_range(self, index):
        with pytest.raises(IndexError):
            ActiveIndex(3).activate(index)

    def test_needs_items(self):
        with pytest.raises(ValueError):
            ActiveIndex(0)

    def test_exactly_one_active(self):
        state = ActiveIndex(4)
        state.activate(2)
        assert sum(state.is_active(i) for i in range(4)) == 1


class TestKeys:
    @pytest.mark.parametrize("key,expected", [
        ("ArrowRight", 2),
        ("ArrowLeft", 0),
        ("Home", 0),
        ("End", 3),
    ])
    def test_keys(self, key, expected):
        state = ActiveIndex(4)
        state.activate(1)
        assert state.handle_key(key) == expected

    def test_unhandled_key(self):
        state = ActiveIndex(4)
        state.activate(1)
        assert state.handle_key("Enter") is None
        assert state.index == 1


class TestProgress:
    def test_proportional(self):
        state = ActiveIndex(5)
        assert state.progress() == 0
        state.activate(2)
        assert state.progress() == 50
        state.last()
        assert state.progress() == 100

    def test_single_item_full(self):
        assert ActiveIndex(1).progress() == 100
