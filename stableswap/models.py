"""Pool snapshot models.

Validation of caller-supplied pool snapshots at the package boundary. A
settlement layer typically holds balances as decimal strings; these models
check them against the u128 domain and the pool capacity once, and hand out
the immutable values the calculators work on.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from stableswap.config import MAX_RESERVES, PERMILL_DENOMINATOR, TARGET_PRECISION, U128_MAX
from stableswap.math.permill import Permill
from stableswap.types import AssetReserve


def validate_uint128(value: Any) -> int:
    """Validate that a value is a u128 integer or decimal string.

    Args:
        value: Value to validate (int or string)

    Returns:
        The value as int

    Raises:
        ValueError: If value is not a non-negative integer within u128 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint128 cannot be a boolean")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint128 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint128 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint128 cannot be negative: {value}")
    if value > U128_MAX:
        raise ValueError(f"Uint128 overflow: {value} > 2^128-1")

    return value


# 128-bit unsigned integer given as int or decimal string (validated)
Uint128 = Annotated[int, BeforeValidator(validate_uint128)]


class ReserveSnapshot(BaseModel):
    """One asset's balance as reported by the caller."""

    model_config = ConfigDict(frozen=True)

    amount: Uint128
    decimals: int = Field(ge=0, le=TARGET_PRECISION)

    def to_reserve(self) -> AssetReserve:
        return AssetReserve(amount=self.amount, decimals=self.decimals)


class PoolSnapshot(BaseModel):
    """Pool state handed to the calculators by the settlement layer.

    Attributes:
        reserves: Ordered reserves; position is the asset identity
        amplification: Amplification coefficient from pool governance
        fee: Pool fee in parts-per-million
        share_issuance: Total share supply
    """

    model_config = ConfigDict(frozen=True)

    reserves: list[ReserveSnapshot] = Field(min_length=2, max_length=MAX_RESERVES)
    amplification: Uint128
    fee: int = Field(default=0, ge=0, le=PERMILL_DENOMINATOR)
    share_issuance: Uint128 = 0

    def to_reserves(self) -> tuple[AssetReserve, ...]:
        """Return the reserves as calculator inputs."""
        return tuple(r.to_reserve() for r in self.reserves)

    @property
    def fee_fraction(self) -> Permill:
        return Permill(self.fee)
