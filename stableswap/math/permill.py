"""Parts-per-million fee fraction.

Fees handed to the calculators are rationals in [0, 1] with a fixed
denominator of 1_000_000. Multiplying an integer amount by a fraction always
names its rounding direction, since the remainder dust lands either with the
pool or with the user.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar

from stableswap.config import PERMILL_DENOMINATOR
from stableswap.safe_int import S

__all__ = ["Permill"]


class Permill:
    """Fraction in [0, 1] stored as an integer number of parts-per-million.

    Example: 0.3% is stored as 3_000
    """

    ACCURACY: ClassVar[int] = PERMILL_DENOMINATOR

    __slots__ = ("parts",)

    def __init__(self, parts: int) -> None:
        """Create from raw parts-per-million.

        Raises:
            ValueError: If parts is outside [0, 1_000_000]
        """
        if isinstance(parts, bool) or not isinstance(parts, int):
            raise TypeError(f"Permill requires int parts, got {type(parts).__name__}")
        if parts < 0 or parts > self.ACCURACY:
            raise ValueError(f"Permill parts must be in [0, {self.ACCURACY}], got {parts}")
        self.parts = parts

    @classmethod
    def zero(cls) -> Permill:
        return cls(0)

    @classmethod
    def one(cls) -> Permill:
        return cls(cls.ACCURACY)

    @classmethod
    def from_percent(cls, percent: int) -> Permill:
        """Create from a whole percentage (e.g. 50 for 50%)."""
        return cls(percent * (cls.ACCURACY // 100))

    @classmethod
    def from_rational(cls, numerator: int, denominator: int) -> Permill:
        """Create from numerator/denominator, rounding down to whole parts.

        Raises:
            ValueError: If denominator is zero or the ratio exceeds one
        """
        if denominator <= 0:
            raise ValueError(f"Permill denominator must be positive, got {denominator}")
        if numerator < 0 or numerator > denominator:
            raise ValueError(f"Permill ratio must be in [0, 1], got {numerator}/{denominator}")
        return cls(numerator * cls.ACCURACY // denominator)

    @classmethod
    def from_decimal(cls, d: Decimal) -> Permill:
        """Create from a decimal fraction (e.g. Decimal("0.001") for 0.1%).

        Uses ROUND_HALF_UP for consistent rounding behavior.
        """
        if d < 0 or d > 1:
            raise ValueError(f"Permill.from_decimal requires a value in [0, 1], got {d}")
        scaled = (d * cls.ACCURACY).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(scaled))

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.parts) / Decimal(self.ACCURACY)

    def is_zero(self) -> bool:
        return self.parts == 0

    def mul_floor(self, amount: int) -> int:
        """Multiply amount by the fraction with floor rounding."""
        return ((S(amount) * self.parts) // self.ACCURACY).value

    def mul_ceil(self, amount: int) -> int:
        """Multiply amount by the fraction with ceiling rounding."""
        return (S(amount) * self.parts).ceiling_div(self.ACCURACY).value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permill):
            return NotImplemented
        return self.parts == other.parts

    def __hash__(self) -> int:
        return hash(self.parts)

    def __repr__(self) -> str:
        return f"Permill({self.parts})"

    def __str__(self) -> str:
        return f"{self.to_decimal() * 100}%"
