"""Structured error types for build-time and evaluation-time failures."""

from __future__ import annotations

import decimal
from dataclasses import dataclass


class RPNError(Exception):
    """Base class for structured rpn-jax errors."""


class RPNBuildError(RPNError):
    """A token could not be applied to the operand stack."""


@dataclass(frozen=True)
class UnknownTokenError(RPNBuildError):
    """Token is neither a registered operator nor a parsable operand."""

    token: str

    def __str__(self) -> str:
        return f"Unknown element or operator: {self.token}"


@dataclass(frozen=True)
class InsufficientOperandsError(RPNBuildError):
    """Fixed-arity operator requested with too few roots on the stack."""

    operator: str
    position: int

    def __str__(self) -> str:
        return f"Operator '{self.operator}' (position {self.position}), insufficient parameter"


@dataclass(frozen=True)
class RejectedTokenError(RPNBuildError):
    """Resolving or applying a token raised an unexpected exception."""

    token: str
    reason: str

    def __str__(self) -> str:
        return f"Cannot apply '{self.token}': {self.reason}"


class RPNArithmeticError(RPNError):
    """Failure raised while forcing a computation."""


class DivisionByZeroError(RPNArithmeticError):
    """Divisor evaluated to zero."""


class InvalidDomainError(RPNArithmeticError):
    """Operation is undefined for its input, e.g. square root of a negative."""


class MalformedLiteralError(RPNArithmeticError):
    """Value cannot be represented as a finite operand."""


class RPNShapeError(RPNArithmeticError):
    """Element-wise operands have incompatible shapes."""


def classify_arithmetic_exception(err: Exception) -> RPNArithmeticError:
    """Best-effort arithmetic error classification for captured failures."""
    if isinstance(err, RPNArithmeticError):
        return err
    if isinstance(err, (ZeroDivisionError, decimal.DivisionByZero)):
        return DivisionByZeroError("Division by zero")
    if isinstance(err, decimal.DecimalException):
        # The C implementation only carries the signal classes as its message.
        return MalformedLiteralError(f"Invalid decimal operation ({type(err).__name__})")

    message = str(err)
    lowered = message.lower()

    shape_markers = ("shape", "broadcast", "rank", "dimension")
    if any(marker in lowered for marker in shape_markers):
        return RPNShapeError(message)

    domain_markers = ("sqrt", "square root", "domain", "negative")
    if any(marker in lowered for marker in domain_markers):
        return InvalidDomainError(message)

    literal_markers = ("literal", "convert", "could not", "invalid")
    if any(marker in lowered for marker in literal_markers):
        return MalformedLiteralError(message)

    return RPNArithmeticError(message or type(err).__name__)
