"""Operand value model: the arithmetic capability and the default decimal operand."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Final, Protocol, TypeVar

from .errors import DivisionByZeroError, InvalidDomainError, MalformedLiteralError

DEFAULT_PRECISION: Final[int] = 15
DEFAULT_DISPLAY_PRECISION: Final[int] = 10

# Minimum digits carried by intermediate results before truncating to the operand scale.
_WORKING_DIGITS: Final[int] = 120
# Largest significand a single value may need; beyond this a result is out of range.
_MAX_DIGITS: Final[int] = 100_000

_O = TypeVar("_O", bound="Operand")


class Operand(Protocol):
    """Arithmetic capability required from any value placed on the stack.

    Every operation returns a new operand or raises an ``RPNArithmeticError``
    (or any exception that ``classify_arithmetic_exception`` understands).
    """

    def add(self: _O, other: _O) -> _O:
        ...

    def subtract(self: _O, other: _O) -> _O:
        ...

    def multiply(self: _O, other: _O) -> _O:
        ...

    def divide(self: _O, other: _O) -> _O:
        ...

    def sqrt(self: _O) -> _O:
        ...


def _working_context(magnitude: int, places: int):
    """Truncating context wide enough for a value with ``magnitude`` integer digits."""
    digits = max(_WORKING_DIGITS, magnitude + places + 2)
    if digits > _MAX_DIGITS:
        raise MalformedLiteralError(f"value out of range: about 10^{magnitude}")
    return localcontext(prec=digits, rounding=ROUND_DOWN, Emax=MAX_EMAX, Emin=MIN_EMIN)


def truncate(value: Decimal, places: int) -> Decimal:
    with _working_context(value.adjusted() + 1, places):
        return value.quantize(Decimal(1).scaleb(-places))


def format_decimal(value: Decimal, display_precision: int) -> str:
    """Render ``value`` cut (not rounded) to ``display_precision`` places."""
    with _working_context(value.adjusted() + 1, display_precision):
        shown = value.quantize(Decimal(1).scaleb(-display_precision))
        if shown.is_zero():
            return "0"
        return format(shown.normalize(), "f")


def parse_decimal(text: str | None) -> Decimal | None:
    if not text or "_" in text or text.strip() != text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


@dataclass(frozen=True)
class Number:
    """Immutable decimal operand with a fixed calculation scale.

    Results are truncated to ``precision`` decimal places; ``str()`` shows at
    most ``display_precision`` places, also truncated, so ``2 sqrt`` renders
    as ``1.4142135623``.
    """

    value: Decimal
    precision: int = DEFAULT_PRECISION
    display_precision: int = DEFAULT_DISPLAY_PRECISION

    @classmethod
    def parse(
        cls,
        text: str | None,
        precision: int = DEFAULT_PRECISION,
        display_precision: int = DEFAULT_DISPLAY_PRECISION,
    ) -> Number | None:
        value = parse_decimal(text)
        if value is None:
            return None
        try:
            return cls.of(value, precision, display_precision)
        except MalformedLiteralError:
            return None

    @classmethod
    def of(
        cls,
        value: Decimal | int | str,
        precision: int = DEFAULT_PRECISION,
        display_precision: int = DEFAULT_DISPLAY_PRECISION,
    ) -> Number:
        try:
            exact = Decimal(value)
        except InvalidOperation as exc:
            raise MalformedLiteralError(f"not a number: {value!r}") from exc
        if not exact.is_finite():
            raise MalformedLiteralError(f"not a finite number: {value!r}")
        return cls(truncate(exact, precision), precision, display_precision)

    def _copy(self, value: Decimal) -> Number:
        return Number.of(value, self.precision, self.display_precision)

    def _context(self, magnitude: int):
        return _working_context(magnitude, self.precision)

    def add(self, other: Number) -> Number:
        with self._context(max(self.value.adjusted(), other.value.adjusted()) + 2):
            return self._copy(self.value + other.value)

    def subtract(self, other: Number) -> Number:
        with self._context(max(self.value.adjusted(), other.value.adjusted()) + 2):
            return self._copy(self.value - other.value)

    def multiply(self, other: Number) -> Number:
        with self._context(self.value.adjusted() + other.value.adjusted() + 2):
            return self._copy(self.value * other.value)

    def divide(self, other: Number) -> Number:
        if other.value.is_zero():
            raise DivisionByZeroError("Division by zero")
        with self._context(self.value.adjusted() - other.value.adjusted() + 2):
            return self._copy(self.value / other.value)

    def sqrt(self) -> Number:
        if self.value.is_signed() and not self.value.is_zero():
            raise InvalidDomainError(f"Square root of negative number: {self}")
        with self._context(self.value.adjusted() // 2 + 2):
            return self._copy(self.value.sqrt())

    def __str__(self) -> str:
        return format_decimal(self.value, self.display_precision)
