"""StableSwap invariant engine.

Pure integer calculations for a multi-asset StableSwap pool whose assets may
carry different decimal precisions: swap amounts, share issuance and
single-asset withdrawals.

The functions exported here return None on any anticipated failure; the
raising forms are available from stableswap.math.
"""

from stableswap.api import (
    calculate_ann,
    calculate_d,
    calculate_in_given_out,
    calculate_in_given_out_with_fee,
    calculate_out_given_in,
    calculate_out_given_in_with_fee,
    calculate_shares,
    calculate_shares_for_amount,
    calculate_shares_for_withdrawal,
    calculate_withdraw_one_asset,
    calculate_y,
)
from stableswap.config import (
    DEFAULT_CONFIG,
    MAX_D_ITERATIONS,
    MAX_RESERVES,
    MAX_Y_ITERATIONS,
    TARGET_PRECISION,
    StableSwapConfig,
)
from stableswap.errors import (
    ArithmeticOverflow,
    InvalidAssetIndex,
    InvalidReserveCount,
    InvalidState,
    InvariantDidNotConverge,
    LengthMismatch,
    NonConvergence,
    ReserveDidNotConverge,
    StableSwapError,
)
from stableswap.math.permill import Permill
from stableswap.models import PoolSnapshot, ReserveSnapshot
from stableswap.types import AssetReserve, Balance

__all__ = [
    # Types
    "AssetReserve",
    "Balance",
    "Permill",
    # Snapshot models
    "PoolSnapshot",
    "ReserveSnapshot",
    # Configuration
    "StableSwapConfig",
    "DEFAULT_CONFIG",
    "MAX_D_ITERATIONS",
    "MAX_Y_ITERATIONS",
    "MAX_RESERVES",
    "TARGET_PRECISION",
    # Invariant
    "calculate_ann",
    "calculate_d",
    "calculate_y",
    # Swaps
    "calculate_out_given_in",
    "calculate_in_given_out",
    "calculate_out_given_in_with_fee",
    "calculate_in_given_out_with_fee",
    # Liquidity
    "calculate_shares",
    "calculate_shares_for_amount",
    "calculate_withdraw_one_asset",
    "calculate_shares_for_withdrawal",
    # Errors
    "StableSwapError",
    "InvalidAssetIndex",
    "LengthMismatch",
    "ArithmeticOverflow",
    "NonConvergence",
    "InvariantDidNotConverge",
    "ReserveDidNotConverge",
    "InvalidState",
    "InvalidReserveCount",
]
