"""Bounded first-in first-out queue."""

from __future__ import annotations

from collections import deque
from typing import Any

__all__ = ["FifoFullError", "FifoEmptyError", "Fifo", "DEFAULT_CAPACITY"]

DEFAULT_CAPACITY = 8


class FifoFullError(Exception):
    """Raised when pushing onto a full queue."""


class FifoEmptyError(Exception):
    """Raised when popping from an empty queue."""


class Fifo:
    """A queue holding at most ``capacity`` items."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._items: deque[Any] = deque()

    def push(self, value: Any) -> None:
        """Append ``value`` at the tail."""
        if len(self._items) >= self.capacity:
            raise FifoFullError(f"queue holds {self.capacity} items already")
        self._items.append(value)

    def pop(self) -> Any:
        """Remove and return the item at the head."""
        if not self._items:
            raise FifoEmptyError("queue is empty")
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)