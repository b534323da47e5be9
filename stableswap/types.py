"""Reserve model.

A reserve is one asset's pool balance together with the decimal precision
the balance is denominated in. Snapshots are immutable; callers build a new
sequence for every state they want to evaluate.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from stableswap.config import MAX_RESERVES, U128_MAX
from stableswap.errors import InvalidAssetIndex, InvalidReserveCount

# Universal amount type: u128 balances, share counts and issuance
Balance = int


@dataclass(frozen=True)
class AssetReserve:
    """Pool balance of a single asset.

    Attributes:
        amount: Balance in the asset's native precision (u128)
        decimals: Number of fractional digits of the asset (u8)
    """

    amount: Balance
    decimals: int

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"amount must be int, got {type(self.amount).__name__}")
        if self.amount < 0 or self.amount > U128_MAX:
            raise ValueError(f"amount must be a u128 value, got {self.amount}")
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise TypeError(f"decimals must be int, got {type(self.decimals).__name__}")
        if self.decimals < 0 or self.decimals > 255:
            raise ValueError(f"decimals must be a u8 value, got {self.decimals}")

    def with_amount(self, amount: Balance) -> AssetReserve:
        """Return a copy of this reserve holding a different amount."""
        return replace(self, amount=amount)


def validate_reserves(reserves: Sequence[AssetReserve], max_reserves: int = MAX_RESERVES) -> None:
    """Check a reserve sequence against the pool capacity.

    Raises:
        InvalidReserveCount: If the sequence holds fewer than 2 or more than
            max_reserves entries
    """
    if len(reserves) < 2 or len(reserves) > max_reserves:
        raise InvalidReserveCount(
            f"Pool must hold between 2 and {max_reserves} assets, got {len(reserves)}"
        )


def validate_index(index: int, n_assets: int, name: str = "asset_idx") -> None:
    """Check that index addresses an asset of an n_assets pool.

    Raises:
        InvalidAssetIndex: If index is negative or >= n_assets
    """
    if index < 0 or index >= n_assets:
        raise InvalidAssetIndex(f"{name} {index} out of range for {n_assets} assets")
