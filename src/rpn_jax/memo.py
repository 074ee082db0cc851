"""At-most-once evaluation of computation nodes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from enum import Enum

from .nodes import Node, Outcome

logger = logging.getLogger(__name__)


class CellState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class MemoNode(Node):
    """Caches the first outcome of ``inner.force()``, success or failure.

    Double-checked: the fast path reads the resolved state without locking;
    otherwise a per-cell lock ensures only one caller computes.
    """

    __slots__ = ("_inner", "_lock", "_state", "_outcome")

    def __init__(self, inner: Node) -> None:
        self._inner = inner
        self._lock = threading.Lock()
        self._state = CellState.UNRESOLVED
        self._outcome: Outcome | None = None

    @property
    def inner(self) -> Node:
        return self._inner

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state is CellState.RESOLVED

    def force(self) -> Outcome:
        if self._state is CellState.RESOLVED:
            return self._outcome
        self._resolve_dependencies()
        with self._lock:
            if self._state is CellState.UNRESOLVED:
                outcome = self._inner.force()
                # Publish the outcome before flipping the state read by the fast path.
                self._outcome = outcome
                self._state = CellState.RESOLVED
                logger.debug("memo cell resolved (%s)", "ok" if outcome.ok else type(outcome.error).__name__)
        return self._outcome

    def _resolve_dependencies(self) -> None:
        """Resolve unresolved descendant cells deepest first, without recursion.

        Siblings are visited left to right and a parent stops at its first
        failed child, matching the order ``Apply.force`` would use. Afterwards
        forcing ``inner`` only touches resolved cells.
        """
        pending: list[tuple[MemoNode, Iterator[Node]]] = [(self, iter(self._inner.dependencies()))]
        while pending:
            cell, children = pending[-1]
            child = next(children, None)
            if child is None:
                pending.pop()
                if pending and not cell.force().ok:
                    pending[-1] = (pending[-1][0], iter(()))
                continue
            if not isinstance(child, MemoNode):
                continue
            if not child.resolved:
                pending.append((child, iter(child.dependencies())))
            elif not child.force().ok:
                pending[-1] = (cell, iter(()))

    def dependencies(self) -> tuple[Node, ...]:
        return self._inner.dependencies()

    def undo(self) -> list[Node]:
        return self._inner.undo()

    @property
    def size(self) -> int:
        return self._inner.size

    def __repr__(self) -> str:
        return f"MemoNode({self._inner!r}, state={self._state.value})"


def memoize(node: Node) -> MemoNode:
    """Wrap ``node`` in a fresh memo cell."""
    return MemoNode(node)
