"""StableSwap entry points.

Every operation of the engine with a uniform failure signal: anticipated
failures (bad index, overflow, non-convergence, invalid pool state) are
logged and reported as None. Callers must treat None as a hard abort of the
enclosing operation.

The raising counterparts live in stableswap.math for callers that need the
failure kind.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from stableswap.config import DEFAULT_CONFIG, StableSwapConfig
from stableswap.errors import StableSwapError
from stableswap.math import invariant, liquidity, swap
from stableswap.math.permill import Permill
from stableswap.math.scaling import normalize_reserves
from stableswap.types import AssetReserve, Balance, validate_reserves

logger = structlog.get_logger()


def _log_failure(event: str, error: StableSwapError, **context: Any) -> None:
    logger.debug(event, error=str(error), error_kind=type(error).__name__, **context)


def calculate_ann(n: int, amp: int) -> Balance | None:
    """Return amp * n^n, or None on overflow."""
    try:
        return invariant.calculate_ann(n, amp)
    except StableSwapError as e:
        _log_failure("stableswap_ann_failed", e, n=n, amp=amp)
        return None


def calculate_d(
    reserves: Sequence[AssetReserve],
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return the invariant D of a reserve snapshot, or None on failure."""
    try:
        return invariant.calculate_d(reserves, amp, config)
    except StableSwapError as e:
        _log_failure("stableswap_invariant_failed", e, n_reserves=len(reserves), amp=amp)
        return None


def calculate_y(
    reserves: Sequence[AssetReserve],
    idx: int,
    d: Balance,
    ann: Balance,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return the reserve at idx that reproduces d, or None on failure.

    The other reserves are held fixed. d, ann and the result are expressed
    in the internal precision, like calculate_d.
    """
    try:
        validate_reserves(reserves, config.max_reserves)
        balances = normalize_reserves(reserves, config.target_precision)
        return invariant.calculate_y(balances, idx, d, ann, config.y_iterations)
    except StableSwapError as e:
        _log_failure("stableswap_reserve_failed", e, idx=idx, d=d, ann=ann)
        return None


def calculate_out_given_in(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_in: Balance,
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return the output amount for amount_in, or None on failure."""
    try:
        return swap.calculate_out_given_in(reserves, idx_in, idx_out, amount_in, amp, config)
    except StableSwapError as e:
        _log_failure(
            "stableswap_out_given_in_failed",
            e,
            idx_in=idx_in,
            idx_out=idx_out,
            amount_in=amount_in,
        )
        return None


def calculate_in_given_out(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_out: Balance,
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return the input amount required for amount_out, or None on failure."""
    try:
        return swap.calculate_in_given_out(reserves, idx_in, idx_out, amount_out, amp, config)
    except StableSwapError as e:
        _log_failure(
            "stableswap_in_given_out_failed",
            e,
            idx_in=idx_in,
            idx_out=idx_out,
            amount_out=amount_out,
        )
        return None


def calculate_out_given_in_with_fee(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_in: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance] | None:
    """Return (amount_out_after_fee, fee_amount), or None on failure."""
    try:
        return swap.calculate_out_given_in_with_fee(reserves, idx_in, idx_out, amount_in, amp, fee, config)
    except StableSwapError as e:
        _log_failure(
            "stableswap_out_given_in_with_fee_failed",
            e,
            idx_in=idx_in,
            idx_out=idx_out,
            amount_in=amount_in,
            fee=fee.parts,
        )
        return None


def calculate_in_given_out_with_fee(
    reserves: Sequence[AssetReserve],
    idx_in: int,
    idx_out: int,
    amount_out: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance] | None:
    """Return (amount_in_with_fee, fee_amount), or None on failure."""
    try:
        return swap.calculate_in_given_out_with_fee(reserves, idx_in, idx_out, amount_out, amp, fee, config)
    except StableSwapError as e:
        _log_failure(
            "stableswap_in_given_out_with_fee_failed",
            e,
            idx_in=idx_in,
            idx_out=idx_out,
            amount_out=amount_out,
            fee=fee.parts,
        )
        return None


def calculate_shares(
    initial_reserves: Sequence[AssetReserve],
    updated_reserves: Sequence[AssetReserve],
    amp: int,
    share_issuance: Balance,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return shares minted for the deposit initial -> updated, or None on failure."""
    try:
        return liquidity.calculate_shares(initial_reserves, updated_reserves, amp, share_issuance, config)
    except StableSwapError as e:
        _log_failure(
            "stableswap_shares_failed",
            e,
            n_initial=len(initial_reserves),
            n_updated=len(updated_reserves),
            share_issuance=share_issuance,
        )
        return None


def calculate_shares_for_amount(
    reserves: Sequence[AssetReserve],
    asset_idx: int,
    amount: Balance,
    amp: int,
    share_issuance: Balance,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return shares minted for a single-asset deposit, or None on failure."""
    try:
        return liquidity.calculate_shares_for_amount(
            reserves, asset_idx, amount, amp, share_issuance, fee, config
        )
    except StableSwapError as e:
        _log_failure(
            "stableswap_shares_for_amount_failed",
            e,
            asset_idx=asset_idx,
            amount=amount,
            share_issuance=share_issuance,
        )
        return None


def calculate_withdraw_one_asset(
    reserves: Sequence[AssetReserve],
    shares: Balance,
    asset_idx: int,
    share_issuance: Balance,
    amp: int,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> tuple[Balance, Balance] | None:
    """Return (amount_to_withdraw, fee_amount) for burning shares, or None on failure."""
    try:
        return liquidity.calculate_withdraw_one_asset(
            reserves, shares, asset_idx, share_issuance, amp, fee, config
        )
    except StableSwapError as e:
        _log_failure(
            "stableswap_withdraw_one_asset_failed",
            e,
            asset_idx=asset_idx,
            shares=shares,
            share_issuance=share_issuance,
        )
        return None


def calculate_shares_for_withdrawal(
    reserves: Sequence[AssetReserve],
    asset_idx: int,
    amount: Balance,
    amp: int,
    share_issuance: Balance,
    fee: Permill,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance | None:
    """Return shares to burn to withdraw exactly amount of one asset, or None on failure."""
    try:
        return liquidity.calculate_shares_for_withdrawal(
            reserves, asset_idx, amount, amp, share_issuance, fee, config
        )
    except StableSwapError as e:
        _log_failure(
            "stableswap_shares_for_withdrawal_failed",
            e,
            asset_idx=asset_idx,
            amount=amount,
            share_issuance=share_issuance,
        )
        return None
