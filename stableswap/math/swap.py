"""StableSwap swap calculators.

Output-given-input and input-given-output amounts for a multi-asset pool,
with and without a fee. All functions take reserves in native precision and
return amounts in the native precision of the asset concerned.

Rounding always favors the pool. The biased solvers keep the solved reserve
a few units on the pool's side; outputs are then scaled down rounding down
and inputs rounding up.
"""

from __future__ import annotations

from collections.abc import Sequence

from stableswap.config import DEFAULT_CONFIG, StableSwapConfig
from stableswap.errors import InvalidAssetIndex, InvalidState
from stableswap.safe_int import S, checked_balance
from stableswap.types import AssetReserve, Balance, validate_index, validate_reserves

from .invariant import calculate_ann, calculate_d_internal, calculate_y
from .permill import Permill
from .scaling import Rounding, normalize_reserves, normalize_value


def _validate_swap(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    config: StableSwapConfig,
) -> None:
    validate_reserves(reserves, config.max_reserves)
    validate_index(idx_in, len(reserves), "idx_in")
    validate_index(idx_out, len(reserves), "idx_out")
    if idx_in == idx_out:
        raise InvalidAssetIndex("Cannot swap an asset with itself")


def calculate_out_given_in(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_in: Balance,
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate the output amount for a given input.

    Algorithm:
        1. Normalize reserves and amount_in to the internal precision
        2. D = invariant of the current reserves
        3. Add amount_in to reserve[idx_in]
        4. Solve for the new reserve[idx_out] that keeps D
        5. Return: old_out - new_out (floored at 0), scaled down rounding down

    Args:
        reserves: Pool reserves in native precision
        idx_in: Index of the asset sold to the pool
        idx_out: Index of the asset bought from the pool
        amount_in: Amount of asset idx_in, native precision
        amp: Amplification coefficient
        config: Iteration bounds, precision and capacity

    Returns:
        Amount of asset idx_out, native precision

    Raises:
        InvalidAssetIndex: If an index is out of range or idx_in == idx_out
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        NonConvergence: If a solver exhausts its iteration bound
        ArithmeticOverflow: If an intermediate value overflows
    """
    _validate_swap(reserves, idx_in, idx_out, config)
    checked_balance(amount_in, "amount_in")

    balances = normalize_reserves(reserves, config.target_precision)
    normalized_in = normalize_value(amount_in, reserves[idx_in].decimals, config.target_precision)

    d = calculate_d_internal(balances, amp, config.d_iterations)
    ann = calculate_ann(len(balances), amp)

    new_balances = list(balances)
    new_balances[idx_in] = (S(balances[idx_in]) + normalized_in).to_u128()

    new_reserve_out = calculate_y(new_balances, idx_out, d, ann, config.y_iterations)

    amount_out = S(balances[idx_out]).saturating_sub(new_reserve_out)
    return normalize_value(
        amount_out.value,
        config.target_precision,
        reserves[idx_out].decimals,
        Rounding.DOWN,
    )


def calculate_in_given_out(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_out: Balance,
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate the input amount required for a given output.

    Algorithm:
        1. Normalize reserves and amount_out to the internal precision
        2. D = invariant of the current reserves
        3. Subtract amount_out from reserve[idx_out]
        4. Solve for the new reserve[idx_in] that keeps D
        5. Return: new_in - old_in, scaled down rounding up

    Args:
        reserves: Pool reserves in native precision
        idx_in: Index of the asset sold to the pool
        idx_out: Index of the asset bought from the pool
        amount_out: Amount of asset idx_out, native precision
        amp: Amplification coefficient
        config: Iteration bounds, precision and capacity

    Returns:
        Amount of asset idx_in, native precision

    Raises:
        InvalidAssetIndex: If an index is out of range or idx_in == idx_out
        InvalidState: If amount_out would drain reserve[idx_out]
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        NonConvergence: If a solver exhausts its iteration bound
        ArithmeticOverflow: If an intermediate value overflows
    """
    _validate_swap(reserves, idx_in, idx_out, config)
    checked_balance(amount_out, "amount_out")

    balances = normalize_reserves(reserves, config.target_precision)
    normalized_out = normalize_value(amount_out, reserves[idx_out].decimals, config.target_precision)
    if normalized_out >= balances[idx_out]:
        raise InvalidState("amount_out must be less than the reserve of idx_out")

    d = calculate_d_internal(balances, amp, config.d_iterations)
    ann = calculate_ann(len(balances), amp)

    new_balances = list(balances)
    new_balances[idx_out] = balances[idx_out] - normalized_out

    new_reserve_in = calculate_y(new_balances, idx_in, d, ann, config.y_iterations)

    amount_in = S(new_reserve_in) - balances[idx_in]
    return normalize_value(
        amount_in.to_u128(),
        config.target_precision,
        reserves[idx_in].decimals,
        Rounding.UP,
    )


def calculate_out_given_in_with_fee(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_in: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance]:
    """Calculate the output for a given input, net of the swap fee.

    The fee is taken from the gross output (rounded down) and is therefore
    denominated in asset idx_out.

    Returns:
        Tuple of (amount_out_after_fee, fee_amount)
    """
    amount_out = calculate_out_given_in(reserves, idx_in, idx_out, amount_in, amp, config)
    fee_amount = fee.mul_floor(amount_out)
    return amount_out - fee_amount, fee_amount


def calculate_in_given_out_with_fee(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_out: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance]:
    """Calculate the input for a given output, including the swap fee.

    The fee is charged on top of the required input (rounded up) and is
    therefore denominated in asset idx_in.

    Returns:
        Tuple of (amount_in_with_fee, fee_amount)
    """
    amount_in = calculate_in_given_out(reserves, idx_in, idx_out, amount_out, amp, config)
    fee_amount = fee.mul_ceil(amount_in)
    return (S(amount_in) + fee_amount).to_u128(), fee_amount
