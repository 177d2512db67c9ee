"""Active-index state machine for steppers and carousels.

Exactly one item is active at a time. ``next``/``prev`` clamp at the ends
for the timeline stepper and wrap around for research cards. The two
variants intentionally differ; the emitted JavaScript follows the same
rules client-side.
"""
from __future__ import annotations

KEY_ACTIONS = {
    "ArrowLeft": "prev",
    "ArrowRight": "next",
    "Home": "first",
    "End": "last",
}


class ActiveIndex:
    """Finite state over ``index`` in ``[0, count)``; starts at 0."""

    def __init__(self, count: int, wrap: bool = False) -> None:
        if count < 1:
            raise ValueError("ActiveIndex needs at least one item")
        self.count = count
        self.wrap = wrap
        self.index = 0

    def activate(self, index: int) -> int:
        if not 0 <= index < self.count:
            raise IndexError(f"index {index} out of range for {self.count} items")
        self.index = index
        return self.index

    def step(self, index: int, delta: int) -> int:
        """Index reached by moving ``delta`` from ``index`` without mutating."""
        target = index + delta
        if self.wrap:
            return target % self.count
        return max(0, min(self.count - 1, target))

    def next(self) -> int:
        return self.activate(self.step(self.index, 1))

    def prev(self) -> int:
        return self.activate(self.step(self.index, -1))

    def first(self) -> int:
        return self.activate(0)

    def last(self) -> int:
        return self.activate(self.count - 1)

    def handle_key(self, key: str) -> int | None:
        """Apply a keyboard navigation key; None when the key is not handled."""
        action = KEY_ACTIONS.get(key)
        if action is None:
            return None
        return getattr(self, action)()

    def neighbors(self, index: int) -> tuple[int, int]:
        """(previous, next) indices of ``index``."""
        return self.step(index, -1), self.step(index, 1)

    def is_active(self, index: int) -> bool:
        return index == self.index

    def progress(self) -> float:
        """Track fill percentage for the current index."""
        if self.count < 2:
            return 100.0
        return self.index / (self.count - 1) * 100
