"""rpn-jax public API."""

from .calculator import Calculator, operand_parser
from .config import CalculatorConfig
from .errors import (
    DivisionByZeroError,
    InsufficientOperandsError,
    InvalidDomainError,
    MalformedLiteralError,
    RPNArithmeticError,
    RPNBuildError,
    RPNError,
    RPNShapeError,
    RejectedTokenError,
    UnknownTokenError,
)
from .memo import CellState, MemoNode, memoize
from .nodes import Apply, Leaf, Node, Outcome
from .registry import Arity, OperationRegistry
from .stack import OperandStack
from .values import Number, Operand

__all__ = [
    "Calculator",
    "CalculatorConfig",
    "operand_parser",
    "OperandStack",
    "OperationRegistry",
    "Arity",
    "Node",
    "Leaf",
    "Apply",
    "Outcome",
    "MemoNode",
    "CellState",
    "memoize",
    "Number",
    "Operand",
    "RPNError",
    "RPNBuildError",
    "UnknownTokenError",
    "InsufficientOperandsError",
    "RejectedTokenError",
    "RPNArithmeticError",
    "DivisionByZeroError",
    "InvalidDomainError",
    "MalformedLiteralError",
    "RPNShapeError",
]
