"""Precision normalization.

Reserves of assets with different decimals are rescaled to one common
internal precision before any cross-asset arithmetic, and results are scaled
back to the asset's native precision afterwards.

Scaling up is exact. Scaling down rounds explicitly:
- Rounding.DOWN floors; used for amounts paid out to a user
- Rounding.UP floors and adds one unit; used for amounts charged to a user
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from stableswap.config import TARGET_PRECISION
from stableswap.errors import ArithmeticOverflow
from stableswap.safe_int import S
from stableswap.types import AssetReserve, Balance


class Rounding(Enum):
    """Rounding direction used when scaling to a lower precision."""

    DOWN = "down"
    UP = "up"


def normalize_value(
    amount: Balance,
    decimals: int,
    target_decimals: int,
    rounding: Rounding = Rounding.DOWN,
) -> Balance:
    """Rescale amount from decimals to target_decimals.

    Args:
        amount: Amount expressed with `decimals` fractional digits
        decimals: Current precision of amount
        target_decimals: Precision to rescale to
        rounding: Direction applied when target_decimals < decimals

    Returns:
        Rescaled amount as a u128 balance

    Raises:
        ArithmeticOverflow: If the rescaled amount does not fit in u128
    """
    if decimals == target_decimals:
        return amount
    diff = abs(target_decimals - decimals)
    factor = S(10) ** diff
    if target_decimals > decimals:
        return (S(amount) * factor).to_u128()
    scaled = S(amount) // factor
    if rounding is Rounding.UP:
        scaled = scaled + 1
    return scaled.to_u128()


def normalize_reserves(
    reserves: Sequence[AssetReserve],
    target_decimals: int = TARGET_PRECISION,
) -> list[Balance]:
    """Rescale every reserve to target_decimals.

    Raises:
        ArithmeticOverflow: If a reserve carries more decimals than the target
            precision, or a rescaled reserve does not fit in u128
    """
    normalized = []
    for i, reserve in enumerate(reserves):
        if reserve.decimals > target_decimals:
            raise ArithmeticOverflow(
                f"Reserve {i} has {reserve.decimals} decimals, "
                f"more than the internal precision of {target_decimals}"
            )
        normalized.append(normalize_value(reserve.amount, reserve.decimals, target_decimals))
    return normalized
