"""Lockable ordered container of tree roots."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from .nodes import Node


class OperandStack:
    """Stack of roots; the top is the most recently pushed cell.

    ``push``, ``pop`` and ``drain_all`` hold one exclusive lock so a batch is
    never interleaved with another mutation. ``snapshot`` copies the current
    contents, so readers work on a point-in-time view that may lag behind a
    concurrent mutator.
    """

    def __init__(self, cells: Iterable[Node] = ()) -> None:
        self._items: deque[Node] = deque(cells)
        self._lock = threading.Lock()

    def push(self, cells: Iterable[Node]) -> None:
        if cells is None:
            raise TypeError("push() expects an iterable of cells, not None")
        batch = list(cells)
        with self._lock:
            self._items.extend(batch)

    def pop(self, n: int) -> list[Node]:
        """Remove the ``n`` most recent cells, returned oldest first.

        Returns an empty list without mutating when ``n < 1`` or ``n`` exceeds
        the number of cells present.
        """
        with self._lock:
            if n < 1 or n > len(self._items):
                return []
            out = [self._items.pop() for _ in range(n)]
        out.reverse()
        return out

    def drain_all(self) -> list[Node]:
        with self._lock:
            out = list(self._items)
            self._items.clear()
        return out

    def snapshot(self) -> tuple[Node, ...]:
        with self._lock:
            return tuple(self._items)

    def shallow_count(self) -> int:
        return len(self._items)

    def weighted_count(self) -> int:
        return sum(cell.size for cell in self.snapshot())

    def __len__(self) -> int:
        return self.shallow_count()

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"OperandStack(shallow={self.shallow_count()}, weighted={self.weighted_count()})"
