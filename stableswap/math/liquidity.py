"""StableSwap liquidity calculators.

Shares minted for deposits and amounts returned for single-asset
withdrawals. Share supply tracks the invariant D: minting and burning are
proportional to the change in D they cause.

Single-asset operations move the pool away from balance. The part of such a
move that a proportional deposit/withdrawal would not have caused is charged
the imbalance fee fee * n / (4 * (n - 1)), as in Curve pools.
"""

from __future__ import annotations

from collections.abc import Sequence

from stableswap.config import DEFAULT_CONFIG, StableSwapConfig
from stableswap.errors import InvalidState, LengthMismatch
from stableswap.safe_int import S, checked_balance
from stableswap.types import AssetReserve, Balance, validate_index, validate_reserves

from .invariant import calculate_ann, calculate_d_internal, calculate_y
from .permill import Permill
from .scaling import Rounding, normalize_reserves, normalize_value

# Subtracted from the updated invariant before minting; covers the solver bias
MINT_INVARIANT_MARGIN = 2


def imbalance_fee_amount(fee: Permill, n_coins: int, amount: Balance) -> Balance:
    """Charge the imbalance fee on an amount.

    Args:
        fee: Nominal pool fee
        n_coins: Number of assets in the pool (>= 2)
        amount: Imbalanced amount, in the internal precision

    Returns:
        amount * fee * n / (4 * (n - 1)), rounded down
    """
    charged = S(amount) * fee.parts * n_coins // (4 * (n_coins - 1) * Permill.ACCURACY)
    return charged.value


def deposit_fee_amount(fee: Permill, amount: Balance) -> Balance:
    """Half of the nominal fee on a single-asset deposit, rounded down."""
    return (S(amount) * fee.parts // (2 * Permill.ACCURACY)).value


def calculate_shares(
    initial_reserves: Sequence[AssetReserve],
    updated_reserves: Sequence[AssetReserve],
    amp: int,
    share_issuance: Balance,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate shares minted for moving the pool from initial to updated reserves.

    Minted shares = issuance * (D_updated - D_initial) / D_initial, rounded
    down, where D_updated is taken 2 units below the solved invariant. The
    very first deposit (zero issuance) mints that reduced D_updated.

    Args:
        initial_reserves: Reserves before the deposit
        updated_reserves: Reserves after the deposit; each must be >= initial
        amp: Amplification coefficient
        share_issuance: Total share supply before the deposit
        config: Iteration bounds, precision and capacity

    Returns:
        Number of shares to mint

    Raises:
        LengthMismatch: If the sequences differ in length
        InvalidState: If any reserve decreases, decimals differ, the reduced
            D_updated falls below D_initial, or the pool is empty while
            shares are outstanding
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        NonConvergence: If the invariant solver exhausts its iteration bound
        ArithmeticOverflow: If an intermediate value overflows
    """
    if len(initial_reserves) != len(updated_reserves):
        raise LengthMismatch(
            f"Initial and updated reserves differ in length: "
            f"{len(initial_reserves)} != {len(updated_reserves)}"
        )
    validate_reserves(initial_reserves, config.max_reserves)
    checked_balance(share_issuance, "share_issuance")

    for i, (initial, updated) in enumerate(zip(initial_reserves, updated_reserves)):
        if initial.decimals != updated.decimals:
            raise InvalidState(f"Reserve {i} changed decimals from {initial.decimals} to {updated.decimals}")
        if updated.amount < initial.amount:
            raise InvalidState(f"Reserve {i} decreased from {initial.amount} to {updated.amount}")

    initial_d = calculate_d_internal(
        normalize_reserves(initial_reserves, config.target_precision), amp, config.d_iterations
    )
    updated_d = calculate_d_internal(
        normalize_reserves(updated_reserves, config.target_precision), amp, config.d_iterations
    )
    updated_d = S(updated_d).saturating_sub(MINT_INVARIANT_MARGIN).value
    if updated_d < initial_d:
        raise InvalidState("Invariant did not increase")

    if share_issuance == 0:
        return updated_d

    if initial_d == 0:
        raise InvalidState("Shares are outstanding but the pool is empty")

    share_amount = S(share_issuance) * (S(updated_d) - initial_d) // initial_d
    return share_amount.to_u128()


def calculate_shares_for_amount(
    reserves: Sequence[AssetReserve],
    asset_idx: int,
    amount: Balance,
    amp: int,
    share_issuance: Balance,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate shares minted for a single-asset deposit.

    Half of the nominal fee is kept from the deposited amount before it is
    added to the reserve; the remainder mints shares as in calculate_shares.

    Raises:
        InvalidAssetIndex: If asset_idx is out of range
        (and everything calculate_shares raises)
    """
    validate_reserves(reserves, config.max_reserves)
    validate_index(asset_idx, len(reserves))
    checked_balance(amount, "amount")

    amount_after_fee = amount - deposit_fee_amount(fee, amount)

    updated_reserves = [
        reserve.with_amount((S(reserve.amount) + amount_after_fee).to_u128()) if i == asset_idx else reserve
        for i, reserve in enumerate(reserves)
    ]
    return calculate_shares(reserves, updated_reserves, amp, share_issuance, config)


def calculate_withdraw_one_asset(
    reserves: Sequence[AssetReserve],
    shares: Balance,
    asset_idx: int,
    share_issuance: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance]:
    """Calculate the amount of one asset returned for burning shares.

    Algorithm:
        1. D0 = current invariant, D1 = D0 - shares * D0 / issuance
        2. y = reserve[asset_idx] that keeps D1 with the other reserves fixed
        3. For every asset, the difference between a proportional withdrawal
           and this single-asset one is charged the imbalance fee
        4. y1 = reserve[asset_idx] that keeps D1 over the fee-reduced reserves
        5. Amount = reduced[asset_idx] - y1 - 1; fee = (reserve - y) - (reduced - y1)

    Args:
        reserves: Pool reserves in native precision
        shares: Shares to burn
        asset_idx: Index of the asset to withdraw
        share_issuance: Total share supply
        amp: Amplification coefficient
        fee: Nominal pool fee
        config: Iteration bounds, precision and capacity

    Returns:
        Tuple of (amount_to_withdraw, fee_amount), both in the native
        precision of asset_idx

    Raises:
        InvalidState: If issuance is zero, shares exceed issuance, or the pool is empty
        InvalidAssetIndex: If asset_idx is out of range
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        NonConvergence: If a solver exhausts its iteration bound
        ArithmeticOverflow: If an intermediate value overflows
    """
    if share_issuance == 0:
        raise InvalidState("Share issuance is zero")
    validate_reserves(reserves, config.max_reserves)
    validate_index(asset_idx, len(reserves))
    checked_balance(shares, "shares")
    checked_balance(share_issuance, "share_issuance")
    if shares > share_issuance:
        raise InvalidState(f"Shares {shares} exceed issuance {share_issuance}")

    balances = normalize_reserves(reserves, config.target_precision)
    n_coins = len(balances)
    ann = calculate_ann(n_coins, amp)

    initial_d = calculate_d_internal(balances, amp, config.d_iterations)
    if initial_d == 0:
        raise InvalidState("Pool is empty")
    d0 = S(initial_d)
    d1 = d0 - S(shares) * d0 // share_issuance

    y = calculate_y(balances, asset_idx, d1.value, ann, config.y_iterations)

    reduced_balances = []
    for j, balance in enumerate(balances):
        proportional = S(balance) * d1 // d0
        if j == asset_idx:
            expected = proportional - y
        else:
            expected = S(balance) - proportional
        charged = imbalance_fee_amount(fee, n_coins, expected.value)
        reduced_balances.append((S(balance) - charged).to_u128())

    y1 = calculate_y(reduced_balances, asset_idx, d1.value, ann, config.y_iterations)

    dy = S(reduced_balances[asset_idx]) - y1
    dy_0 = S(balances[asset_idx]) - y
    fee_amount = dy_0 - dy

    decimals = reserves[asset_idx].decimals
    amount = normalize_value(dy.saturating_sub(1).value, config.target_precision, decimals, Rounding.DOWN)
    fee_amount = normalize_value(fee_amount.value, config.target_precision, decimals, Rounding.DOWN)
    return amount, fee_amount


def calculate_shares_for_withdrawal(
    reserves: Sequence[AssetReserve],
    asset_idx: int,
    amount: Balance,
    amp: int,
    share_issuance: Balance,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate the shares to burn to withdraw exactly `amount` of one asset.

    Algorithm:
        1. D0 = current invariant, D1 = invariant with amount removed
        2. The withdrawn reserve's distance from its proportional target
           D1 * x / D0 is charged the imbalance fee, which stays in the pool
           and is taken off that reserve only
        3. D2 = invariant of the fee-adjusted reserves
        4. Shares = issuance * (D0 - D2) / D0 + 1 (the burn rounds up)

    Raises:
        InvalidState: If issuance is zero, amount would drain the reserve,
            or the burn exceeds issuance
        InvalidAssetIndex: If asset_idx is out of range
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        NonConvergence: If the invariant solver exhausts its iteration bound
        ArithmeticOverflow: If an intermediate value overflows
    """
    if share_issuance == 0:
        raise InvalidState("Share issuance is zero")
    validate_reserves(reserves, config.max_reserves)
    validate_index(asset_idx, len(reserves))
    checked_balance(amount, "amount")
    checked_balance(share_issuance, "share_issuance")

    balances = normalize_reserves(reserves, config.target_precision)
    normalized_amount = normalize_value(amount, reserves[asset_idx].decimals, config.target_precision)
    if normalized_amount >= balances[asset_idx]:
        raise InvalidState("amount must be less than the reserve of asset_idx")

    updated_balances = list(balances)
    updated_balances[asset_idx] = balances[asset_idx] - normalized_amount

    initial_d = calculate_d_internal(balances, amp, config.d_iterations)
    updated_d = calculate_d_internal(updated_balances, amp, config.d_iterations)
    d0 = S(initial_d)

    ideal = S(updated_d) * balances[asset_idx] // d0
    difference = ideal.abs_diff(balances[asset_idx])
    fee_amount = imbalance_fee_amount(fee, len(balances), difference.value)

    adjusted_balances = list(updated_balances)
    adjusted_balances[asset_idx] = (S(updated_balances[asset_idx]) - fee_amount).to_u128()

    adjusted_d = calculate_d_internal(adjusted_balances, amp, config.d_iterations)

    shares = (S(share_issuance) * (d0 - adjusted_d) // d0 + 1).to_u128()
    if shares > share_issuance:
        raise InvalidState(f"Withdrawal requires {shares} shares, more than issuance {share_issuance}")
    return shares
