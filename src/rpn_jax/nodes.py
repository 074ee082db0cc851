"""Computation nodes: deferred values and operator applications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from .errors import RPNArithmeticError, classify_arithmetic_exception


@dataclass(frozen=True)
class Outcome:
    """Result of forcing a node: either a value or an arithmetic failure."""

    value: object = None
    error: RPNArithmeticError | None = None

    @classmethod
    def success(cls, value: object) -> Outcome:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RPNArithmeticError) -> Outcome:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> object:
        if self.error is not None:
            raise self.error
        return self.value

    def __str__(self) -> str:
        return str(self.value) if self.error is None else str(self.error)


class Node(ABC):
    """A deferred computation.

    force: evaluate to an ``Outcome``.
    undo: the direct children this node was built from.
    size: number of nodes in this subtree.
    dependencies: nodes ``force`` evaluates first, in evaluation order.
    """

    @abstractmethod
    def force(self) -> Outcome:
        ...

    def dependencies(self) -> tuple[Node, ...]:
        return ()

    @abstractmethod
    def undo(self) -> list[Node]:
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        ...


@dataclass(frozen=True, eq=False)
class Leaf(Node):
    operand: object

    @property
    def arity(self) -> int:
        return 0

    @property
    def size(self) -> int:
        return 1

    def force(self) -> Outcome:
        return Outcome.success(self.operand)

    def undo(self) -> list[Node]:
        return []


@dataclass(frozen=True, eq=False)
class Apply(Node):
    """Operator applied to child nodes, left to right."""

    symbol: str
    children: tuple[Node, ...]
    combine: Callable[..., object]
    _size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.children:
            raise ValueError(f"operator {self.symbol!r} needs at least one child")
        object.__setattr__(self, "_size", 1 + sum(child.size for child in self.children))

    @property
    def arity(self) -> int:
        return len(self.children)

    @property
    def size(self) -> int:
        return self._size

    def force(self) -> Outcome:
        values = []
        for child in self.children:
            outcome = child.force()
            if not outcome.ok:
                return outcome
            values.append(outcome.value)
        try:
            return Outcome.success(self.combine(*values))
        except Exception as err:
            return Outcome.failure(classify_arithmetic_exception(err))

    def dependencies(self) -> tuple[Node, ...]:
        return self.children

    def undo(self) -> list[Node]:
        return list(self.children)
