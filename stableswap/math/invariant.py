"""StableSwap invariant math.

Core solvers for multi-asset StableSwap (Curve-style) pools. Both the
invariant D and a single unknown reserve Y are found by Newton-Raphson
iteration over normalized (common-precision) reserves.

Every Newton step adds SOLVER_BIAS to its estimate. Both D and Y therefore
come out slightly above the exact root: the pool's invariant is overstated
and a solved reserve is kept a few units high, so trades and withdrawals
priced from them always leave the rounding dust in the pool.

IMPORTANT: All intermediate arithmetic goes through SafeInt, so every step
is checked; results are narrowed to u128.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from stableswap.config import DEFAULT_CONFIG, MAX_D_ITERATIONS, MAX_Y_ITERATIONS, StableSwapConfig
from stableswap.errors import (
    InvalidState,
    InvariantDidNotConverge,
    ReserveDidNotConverge,
)
from stableswap.safe_int import S, SafeInt
from stableswap.types import AssetReserve, Balance, validate_index, validate_reserves

from .scaling import normalize_reserves

logger = structlog.get_logger()

# Solvers stop once successive approximations differ by at most this much
CONVERGENCE_TOLERANCE = 1

# Added to every Newton estimate of D and Y so both round in the pool's favor
SOLVER_BIAS = 2


def calculate_ann(n: int, amp: int) -> Balance:
    """Scale the amplification coefficient by n^n.

    Args:
        n: Number of assets in the pool (0 returns amp unchanged)
        amp: Amplification coefficient

    Returns:
        amp * n^n as a u128 value

    Raises:
        ArithmeticOverflow: If the product does not fit in u128
    """
    ann = S(amp)
    for _ in range(n):
        ann = ann * n
    return ann.to_u128()


def _has_converged(previous: SafeInt, current: SafeInt) -> bool:
    return previous.abs_diff(current) <= CONVERGENCE_TOLERANCE


def calculate_d_internal(
    balances: Sequence[Balance],
    amp: int,
    max_iterations: int = MAX_D_ITERATIONS,
) -> Balance:
    """Calculate the StableSwap invariant D for normalized balances.

    Solves
        Ann * S + D = Ann * D + D^(n+1) / (n^n * prod(x))
    for D, where S is the sum of balances and Ann = amp * n^n.

    Algorithm:
        1. Initial guess: D = S
        2. D_p = D^(n+1) / (n^n * prod(x)), folded one balance at a time
        3. D' = (Ann*S + n*D_p) * D / ((Ann - 1) * D + (n + 1) * D_p) + 2
        4. Stop when |D' - D| <= 1

    Balances are visited in ascending order so the integer rounding of the
    D_p fold does not depend on asset order.

    Args:
        balances: Balances already scaled to the internal precision
        amp: Amplification coefficient (not yet scaled by n^n)
        max_iterations: Newton iteration bound

    Returns:
        The invariant D (0 when every balance is 0)

    Raises:
        InvalidState: If amp is zero, or some but not all balances are zero
        InvariantDidNotConverge: If the iteration bound is exhausted
        ArithmeticOverflow: If an intermediate value overflows
    """
    non_zero = sorted(b for b in balances if b != 0)
    if not non_zero:
        return 0
    if len(non_zero) != len(balances):
        raise InvalidState("Either all balances or none of them must be zero")
    if amp == 0:
        raise InvalidState("Amplification must be positive")

    n_coins = len(non_zero)
    ann = S(calculate_ann(n_coins, amp))
    sum_balances = S(0)
    for balance in non_zero:
        sum_balances = sum_balances + balance

    d = sum_balances
    for _ in range(max_iterations):
        d_p = d
        for balance in non_zero:
            d_p = (d_p * d) // (S(balance) * n_coins)

        d_prev = d
        numerator = (ann * sum_balances + d_p * n_coins) * d
        denominator = (ann - 1) * d + S(n_coins + 1) * d_p
        d = numerator // denominator + SOLVER_BIAS

        if _has_converged(d_prev, d):
            return d.to_u128()

    logger.debug(
        "stableswap_invariant_not_converged",
        n_coins=n_coins,
        amp=amp,
        max_iterations=max_iterations,
    )
    raise InvariantDidNotConverge(f"Invariant did not converge after {max_iterations} iterations")


def calculate_d(
    reserves: Sequence[AssetReserve],
    amp: int,
    config: StableSwapConfig = DEFAULT_CONFIG,
) -> Balance:
    """Calculate the invariant D of a reserve snapshot.

    Reserves are normalized to the internal precision first; D is expressed
    in that precision.

    Raises:
        InvalidReserveCount: If the snapshot size is outside [2, capacity]
        InvalidState: If some but not all reserves are zero
        InvariantDidNotConverge: If the iteration bound is exhausted
        ArithmeticOverflow: On decimals above the internal precision or overflow
    """
    validate_reserves(reserves, config.max_reserves)
    balances = normalize_reserves(reserves, config.target_precision)
    return calculate_d_internal(balances, amp, config.d_iterations)


def calculate_y_internal(
    other_balances: Sequence[Balance],
    d: Balance,
    ann: Balance,
    max_iterations: int = MAX_Y_ITERATIONS,
) -> Balance:
    """Solve for the one unknown balance given D and all other balances.

    With n = len(other_balances) + 1 and S' the sum of the other balances:
        c = D^(n+1) / (n^n * prod(other) * Ann)
        b = S' + D / Ann
        y' = (y^2 + c) / (2y + b - D) + 2, starting from y = D

    Args:
        other_balances: Normalized balances of every asset except the unknown one
        d: Invariant to reproduce
        ann: amp * n^n for the full pool
        max_iterations: Newton iteration bound

    Returns:
        The unknown balance, in the internal precision

    Raises:
        InvalidState: If ann is zero or any fixed balance is zero
        ReserveDidNotConverge: If the iteration bound is exhausted
        ArithmeticOverflow: If an intermediate value overflows
    """
    if ann == 0:
        raise InvalidState("Amplification must be positive")
    if any(b == 0 for b in other_balances):
        raise InvalidState("Fixed balances must be positive")

    n_coins = len(other_balances) + 1
    d_hp = S(d)
    ann_hp = S(ann)

    sum_others = S(0)
    c = d_hp
    for balance in sorted(other_balances):
        sum_others = sum_others + balance
        c = (c * d_hp) // (S(balance) * n_coins)

    c = (c * d_hp) // (ann_hp * n_coins)
    b = sum_others + d_hp // ann_hp

    y = d_hp
    for _ in range(max_iterations):
        y_prev = y
        y = (y * y + c) // (S(2) * y + b - d_hp) + SOLVER_BIAS

        if _has_converged(y_prev, y):
            return y.to_u128()

    logger.debug(
        "stableswap_reserve_not_converged",
        n_coins=n_coins,
        ann=ann,
        max_iterations=max_iterations,
    )
    raise ReserveDidNotConverge(f"Reserve did not converge after {max_iterations} iterations")


def calculate_y(
    balances: Sequence[Balance],
    idx: int,
    d: Balance,
    ann: Balance,
    max_iterations: int = MAX_Y_ITERATIONS,
) -> Balance:
    """Solve for balances[idx] so that the pool reproduces invariant d.

    The value currently at balances[idx] is ignored; every other entry is
    held fixed.

    Raises:
        InvalidAssetIndex: If idx is outside the balances
        InvalidState: If ann is zero or any fixed balance is zero
        ReserveDidNotConverge: If the iteration bound is exhausted
        ArithmeticOverflow: If an intermediate value overflows
    """
    validate_index(idx, len(balances), "idx")
    others = [b for j, b in enumerate(balances) if j != idx]
    return calculate_y_internal(others, d, ann, max_iterations)
