"""Safe integer wrapper for arithmetic on token amounts.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
operations safe by default:
- Division by zero raises ArithmeticError
- Subtraction underflow raises ArithmeticError
- u64 overflow is caught on conversion

Intermediate products (amount * reserve) routinely exceed 64 bits, so all
math runs on Python's unbounded ints and only the final results are narrowed
back to u64 with to_u64().

Usage pattern:
    from amm_client.safe_int import S

    def calculate(a: int, b: int, c: int) -> int:
        sa, sb, sc = S(a), S(b), S(c)
        result = (sa * sb) // sc  # Raises if sc == 0
        return result.to_u64()
"""

from __future__ import annotations

from math import isqrt

from amm_client.models.types import U64_MAX


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class U64Overflow(SafeIntError):
    """Value does not fit in an unsigned 64-bit field."""

    pass


class SafeInt:
    """Integer with safe arithmetic operations.

    Wraps an integer and provides arithmetic operators that raise
    descriptive errors instead of producing invalid results:
    - Division by zero raises DivisionByZero
    - Negative results from subtraction raise Underflow
    - Values exceeding u64 raise U64Overflow on to_u64()

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt((self._value + other_val - 1) // other_val)

    def isqrt(self) -> SafeInt:
        """Integer square root (floor).

        Raises:
            Underflow: If the value is negative
        """
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(isqrt(self._value))

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def to_u64(self) -> int:
        """Convert to int, validating u64 bounds.

        Raises:
            U64Overflow: If value is negative or exceeds 2^64-1
        """
        if self._value < 0:
            raise U64Overflow(f"Negative value cannot be u64: {self._value}")
        if self._value > U64_MAX:
            raise U64Overflow(f"Value exceeds u64 max: {self._value}")
        return self._value

    def is_u64(self) -> bool:
        """Check if value fits in u64 without raising."""
        return 0 <= self._value <= U64_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
