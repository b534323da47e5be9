"""Checked integer wrapper for pool arithmetic.

This module provides SafeInt, a lightweight wrapper that never lets an
arithmetic step silently produce an out-of-domain value:
- Addition and multiplication beyond 2^256-1 raise WideOverflow
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero
- Narrowing to a u128 balance is checked by to_u128()

Intermediate products (D^2, D^(n+1)/prod, ...) are evaluated in the 256-bit
domain; every value handed back to a caller is narrowed to u128.

Usage pattern:
    from stableswap.safe_int import S

    def mul_div(a: int, b: int, c: int) -> int:
        # Wrap at entry
        sa, sb, sc = S(a), S(b), S(c)

        # Natural arithmetic - automatically checked
        result = (sa * sb) // sc  # Raises if sc == 0

        # Narrow at exit
        return result.to_u128()
"""

from __future__ import annotations

from stableswap.config import U128_MAX, U256_MAX
from stableswap.errors import ArithmeticOverflow


class SafeIntError(ArithmeticOverflow, ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""

    pass


class WideOverflow(SafeIntError):
    """Intermediate value exceeds 2^256-1."""

    pass


class Uint128Overflow(SafeIntError):
    """Value does not fit a u128 balance."""

    pass


def _check_wide(value: int, op: str) -> int:
    if value > U256_MAX:
        raise WideOverflow(f"Overflow in {op}: result exceeds 2^256-1")
    return value


class SafeInt:
    """Non-negative integer with checked arithmetic.

    Every operator returns a new SafeInt whose value is guaranteed to lie in
    [0, 2^256-1]; anything else raises a SafeIntError. Values are narrowed
    to the u128 balance domain explicitly with to_u128().

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Args:
            value: Integer value to wrap, or SafeInt to copy

        Raises:
            TypeError: If value is not an int or SafeInt (bool is rejected)
            Underflow: If value is negative
            WideOverflow: If value exceeds 2^256-1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"SafeInt cannot hold a negative value: {value}")
        self._value = _check_wide(value, "construction")

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
        """Add two values.

        Raises:
            WideOverflow: If the sum exceeds 2^256-1
        """
        return SafeInt(_check_wide(self._value + _extract_value(other), "addition"))

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

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
        return SafeInt(other).__sub__(self)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            WideOverflow: If the product exceeds 2^256-1
        """
        return SafeInt(_check_wide(self._value * _extract_value(other), "multiplication"))

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding down.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __pow__(self, exponent: int) -> SafeInt:
        """Raise to a non-negative integer power, checking every step."""
        if exponent < 0:
            raise ValueError(f"Negative exponent not supported: {exponent}")
        result = SafeInt(1)
        for _ in range(exponent):
            result = result * self
        return result

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

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
        """True if non-zero."""
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
        return SafeInt(-(-self._value // other_val))

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Absolute difference |self - other|."""
        return SafeInt(abs(self._value - _extract_value(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping the result to zero instead of raising."""
        return SafeInt(max(0, self._value - _extract_value(other)))

    def to_u128(self) -> int:
        """Convert to int, validating the u128 bound.

        Raises:
            Uint128Overflow: If value exceeds 2^128-1
        """
        if self._value > U128_MAX:
            raise Uint128Overflow(f"Value exceeds u128 max: {self._value}")
        return self._value

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def checked_balance(value: int, name: str = "value") -> int:
    """Validate that value is a u128 balance and return it unchanged.

    Raises:
        TypeError: If value is not an int
        Underflow: If value is negative
        Uint128Overflow: If value exceeds 2^128-1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if value < 0:
        raise Underflow(f"{name} cannot be negative: {value}")
    if value > U128_MAX:
        raise Uint128Overflow(f"{name} exceeds u128 max: {value}")
    return value


# Convenience alias for concise code
S = SafeInt
