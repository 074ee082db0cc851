"""Element-wise operand on top of JAX arrays."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Final

import jax
import jax.numpy as jnp

from .errors import DivisionByZeroError, InvalidDomainError, MalformedLiteralError, RPNShapeError
from .values import DEFAULT_DISPLAY_PRECISION, format_decimal, parse_decimal

_ENABLE_X64: Final[bool] = os.environ.get("RPN_JAX_ENABLE_X64", "1") != "0"

if _ENABLE_X64:
    jax.config.update("jax_enable_x64", True)

ELEMENT_SEPARATOR: Final[str] = ","


def _as_float_array(values) -> jnp.ndarray:
    return jnp.asarray(values, dtype=jnp.float64 if _ENABLE_X64 else jnp.float32)


@dataclass(frozen=True, eq=False)
class ArrayOperand:
    """Scalar or vector operand with broadcasting arithmetic.

    Literals are a single number (``4``) or comma-joined numbers (``1,2,3``).
    """

    data: jnp.ndarray
    display_precision: int = DEFAULT_DISPLAY_PRECISION

    @classmethod
    def parse(cls, text: str | None, display_precision: int = DEFAULT_DISPLAY_PRECISION) -> ArrayOperand | None:
        if not text:
            return None
        parts = text.split(ELEMENT_SEPARATOR)
        values: list[float] = []
        for part in parts:
            value = parse_decimal(part)
            if value is None:
                return None
            values.append(float(value))
        if len(parts) == 1:
            return cls(_as_float_array(values[0]), display_precision)
        return cls(_as_float_array(values), display_precision)

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self.data.shape)

    def _copy(self, data: jnp.ndarray) -> ArrayOperand:
        if not bool(jnp.all(jnp.isfinite(data))):
            raise MalformedLiteralError(f"result is not finite: {self._render(data)}")
        return ArrayOperand(data, self.display_precision)

    def _check_shapes(self, other: ArrayOperand) -> None:
        try:
            jnp.broadcast_shapes(self.shape, other.shape)
        except ValueError as exc:
            raise RPNShapeError(f"Incompatible shapes {self.shape} and {other.shape}") from exc

    def add(self, other: ArrayOperand) -> ArrayOperand:
        self._check_shapes(other)
        return self._copy(self.data + other.data)

    def subtract(self, other: ArrayOperand) -> ArrayOperand:
        self._check_shapes(other)
        return self._copy(self.data - other.data)

    def multiply(self, other: ArrayOperand) -> ArrayOperand:
        self._check_shapes(other)
        return self._copy(self.data * other.data)

    def divide(self, other: ArrayOperand) -> ArrayOperand:
        self._check_shapes(other)
        if bool(jnp.any(other.data == 0)):
            raise DivisionByZeroError("Division by zero")
        return self._copy(self.data / other.data)

    def sqrt(self) -> ArrayOperand:
        if bool(jnp.any(self.data < 0)):
            raise InvalidDomainError(f"Square root of negative number: {self}")
        return self._copy(jnp.sqrt(self.data))

    def tolist(self) -> list[float]:
        return [float(x) for x in jnp.ravel(self.data).tolist()]

    def _render(self, data: jnp.ndarray) -> str:
        items = [float(x) for x in jnp.ravel(data).tolist()]
        return ELEMENT_SEPARATOR.join(
            format_decimal(Decimal(repr(x)), self.display_precision) if math.isfinite(x) else repr(x) for x in items
        )

    def __str__(self) -> str:
        return self._render(self.data)
