"""Operator table and token resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final, Union

from .nodes import Apply, Leaf, Node


class Arity(Enum):
    """Number of stack roots an operation consumes; ``ALL`` drains the stack."""

    ZERO = 0
    ONE = 1
    TWO = 2
    ALL = -1


@dataclass(frozen=True)
class OperandDefinition:
    """Push a literal operand as a new leaf."""

    operand: object

    @property
    def arity(self) -> Arity:
        return Arity.ZERO


@dataclass(frozen=True)
class UnaryDefinition:
    symbol: str
    fn: Callable[[object], object]

    @property
    def arity(self) -> Arity:
        return Arity.ONE


@dataclass(frozen=True)
class BinaryDefinition:
    """``fn(left, right)`` where ``left`` was pushed before ``right``."""

    symbol: str
    fn: Callable[[object, object], object]

    @property
    def arity(self) -> Arity:
        return Arity.TWO


@dataclass(frozen=True)
class StackDefinition:
    """Rearranges popped roots without building a new operator node."""

    symbol: str
    arity: Arity
    fn: Callable[[list[Node]], list[Node]]


Definition = Union[OperandDefinition, UnaryDefinition, BinaryDefinition, StackDefinition]


def _check_count(definition: Definition, children: list[Node]) -> None:
    arity = definition.arity
    if arity is not Arity.ALL and len(children) != arity.value:
        raise ValueError(
            f"Unexpected state: expects {arity.value} arguments but receives {len(children)} arguments"
        )


def transform(definition: Definition, children: list[Node]) -> list[Node]:
    """Build the replacement roots for ``children`` popped from the stack."""
    _check_count(definition, children)
    if isinstance(definition, OperandDefinition):
        return [Leaf(definition.operand)]
    if isinstance(definition, UnaryDefinition):
        return [Apply(definition.symbol, (children[0],), definition.fn)]
    if isinstance(definition, BinaryDefinition):
        left, right = children
        return [Apply(definition.symbol, (left, right), definition.fn)]
    if isinstance(definition, StackDefinition):
        return list(definition.fn(list(children)))
    raise TypeError(f"Unsupported operation definition: {type(definition).__name__}")


def _clear(_children: list[Node]) -> list[Node]:
    return []


def _undo(children: list[Node]) -> list[Node]:
    return children[0].undo()


def _default_operators() -> dict[str, Definition]:
    return {
        "+": BinaryDefinition("+", lambda left, right: left.add(right)),
        "-": BinaryDefinition("-", lambda left, right: left.subtract(right)),
        "*": BinaryDefinition("*", lambda left, right: left.multiply(right)),
        "/": BinaryDefinition("/", lambda left, right: left.divide(right)),
        "sqrt": UnaryDefinition("sqrt", lambda value: value.sqrt()),
        "clear": StackDefinition("clear", Arity.ALL, _clear),
        "undo": StackDefinition("undo", Arity.ONE, _undo),
    }


DEFAULT_SYMBOLS: Final[tuple[str, ...]] = tuple(_default_operators())


class OperationRegistry:
    """Resolves tokens to operator definitions, falling back to operand literals.

    One registry is built per calculator; ``parse_operand`` returns ``None``
    for text that is not a literal.
    """

    def __init__(self, parse_operand: Callable[[str], object | None]) -> None:
        self._parse_operand = parse_operand
        self._operators = _default_operators()

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(self._operators)

    def register(self, symbol: str, definition: Definition) -> None:
        if isinstance(definition, OperandDefinition):
            raise TypeError("operand literals are resolved by the operand parser, not registered")
        self._operators[symbol] = definition

    def register_unary(self, symbol: str, fn: Callable[[object], object]) -> None:
        self.register(symbol, UnaryDefinition(symbol, fn))

    def register_binary(self, symbol: str, fn: Callable[[object, object], object]) -> None:
        self.register(symbol, BinaryDefinition(symbol, fn))

    def resolve(self, token: str) -> Definition | None:
        definition = self._operators.get(token)
        if definition is not None:
            return definition
        operand = self._parse_operand(token)
        if operand is None:
            return None
        return OperandDefinition(operand)
