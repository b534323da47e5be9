"""Tests for the non-raising entry points.

Every entry point returns the same value as its raising counterpart on
success, and None plus a debug log entry on failure.
"""

import pytest
from structlog.testing import capture_logs

import stableswap
from stableswap import api
from stableswap.config import U128_MAX, StableSwapConfig
from stableswap.math.permill import Permill
from tests.helpers import (
    EQUAL_POOL_AMP,
    EQUAL_POOL_D,
    EQUAL_POOL_DEPOSITED,
    MIXED_POOL_AMP,
    ONE_18,
    make_reserves,
    make_uniform_reserves,
)


def _single_failure(logs, event):
    failures = [entry for entry in logs if entry["event"] == event]
    assert len(failures) == 1
    assert failures[0]["log_level"] == "debug"
    return failures[0]


class TestSuccess:
    """Results pass through unchanged."""

    def test_calculate_ann(self) -> None:
        assert api.calculate_ann(2, 100) == 400

    def test_calculate_d(self, equal_pool) -> None:
        assert api.calculate_d(equal_pool, EQUAL_POOL_AMP) == EQUAL_POOL_D

    def test_calculate_y(self, equal_pool) -> None:
        ann = api.calculate_ann(5, EQUAL_POOL_AMP)
        assert api.calculate_y(equal_pool, 0, EQUAL_POOL_D, ann) == 10**10 + 4

    def test_swaps(self, equal_pool) -> None:
        assert api.calculate_out_given_in(equal_pool, 2, 4, 2_000, EQUAL_POOL_AMP) == 1_999
        assert api.calculate_in_given_out(equal_pool, 2, 4, 2_000, EQUAL_POOL_AMP) == 2_001

    def test_swaps_with_fee(self, mixed_pool) -> None:
        fee = Permill.from_percent(1)
        assert api.calculate_out_given_in_with_fee(mixed_pool, 2, 1, ONE_18, MIXED_POOL_AMP, fee) == (
            989_920,
            9_999,
        )
        assert api.calculate_in_given_out_with_fee(mixed_pool, 1, 2, ONE_18, MIXED_POOL_AMP, fee) == (
            1_009_921,
            10_000,
        )

    def test_liquidity(self, equal_pool) -> None:
        updated = make_reserves(EQUAL_POOL_DEPOSITED)
        assert api.calculate_shares(equal_pool, updated, EQUAL_POOL_AMP, 100_000) == 9_999
        assert (
            api.calculate_shares_for_amount(equal_pool, 2, 5_000, EQUAL_POOL_AMP, 100_000, Permill.zero())
            == 9_999
        )
        assert api.calculate_withdraw_one_asset(
            equal_pool, 2_000, 2, 52_000, EQUAL_POOL_AMP, Permill.from_percent(50)
        ) == (1_442, 480)

    def test_shares_for_withdrawal(self, balanced_pool) -> None:
        assert (
            api.calculate_shares_for_withdrawal(balanced_pool, 0, 10**14, 100, 2 * 10**22, Permill.zero())
            == 40_000_002_575_489_444_434
        )

    def test_package_exports_entry_points(self) -> None:
        assert stableswap.calculate_out_given_in is api.calculate_out_given_in
        assert stableswap.calculate_withdraw_one_asset is api.calculate_withdraw_one_asset


class TestFailure:
    """Anticipated failures become None and are logged."""

    def test_ann_overflow(self) -> None:
        with capture_logs() as logs:
            assert api.calculate_ann(5, U128_MAX) is None
        entry = _single_failure(logs, "stableswap_ann_failed")
        assert entry["error_kind"] == "Uint128Overflow"

    def test_d_mixed_zero_reserves(self) -> None:
        with capture_logs() as logs:
            assert api.calculate_d(make_reserves([(5, 18), (0, 18)]), 100) is None
        entry = _single_failure(logs, "stableswap_invariant_failed")
        assert entry["error_kind"] == "InvalidState"

    def test_d_non_convergence(self, high_precision_pool) -> None:
        config = StableSwapConfig(d_iterations=1)
        with capture_logs() as logs:
            assert api.calculate_d(high_precision_pool, MIXED_POOL_AMP, config) is None
        events = [entry["event"] for entry in logs]
        assert "stableswap_invariant_not_converged" in events
        entry = _single_failure(logs, "stableswap_invariant_failed")
        assert entry["error_kind"] == "InvariantDidNotConverge"

    def test_d_zero_amplification(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_d(equal_pool, 0) is None
        entry = _single_failure(logs, "stableswap_invariant_failed")
        assert entry["error_kind"] == "InvalidState"

    def test_shares_unchanged_reserves(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_shares(equal_pool, equal_pool, EQUAL_POOL_AMP, 100_000) is None
        entry = _single_failure(logs, "stableswap_shares_failed")
        assert entry["error_kind"] == "InvalidState"

    def test_y_zero_ann(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_y(equal_pool, 0, EQUAL_POOL_D, 0) is None
        _single_failure(logs, "stableswap_reserve_failed")

    def test_y_bad_index(self, equal_pool) -> None:
        assert api.calculate_y(equal_pool, 5, EQUAL_POOL_D, 312_500) is None

    def test_out_given_in_same_index(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_out_given_in(equal_pool, 1, 1, 2_000, EQUAL_POOL_AMP) is None
        entry = _single_failure(logs, "stableswap_out_given_in_failed")
        assert entry["error_kind"] == "InvalidAssetIndex"
        assert entry["idx_in"] == 1
        assert entry["amount_in"] == 2_000

    def test_in_given_out_draining(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_in_given_out(equal_pool, 0, 1, 10_000, EQUAL_POOL_AMP) is None
        entry = _single_failure(logs, "stableswap_in_given_out_failed")
        assert entry["error_kind"] == "InvalidState"

    def test_swaps_with_fee_bad_reserve_count(self) -> None:
        single = make_uniform_reserves(ONE_18, count=1)
        fee = Permill(3_000)
        assert api.calculate_out_given_in_with_fee(single, 0, 1, 1, 100, fee) is None
        assert api.calculate_in_given_out_with_fee(single, 0, 1, 1, 100, fee) is None

    def test_swap_non_convergence(self, equal_pool) -> None:
        config = StableSwapConfig(y_iterations=1)
        with capture_logs() as logs:
            assert api.calculate_out_given_in(equal_pool, 2, 4, 2_000, EQUAL_POOL_AMP, config) is None
        entry = _single_failure(logs, "stableswap_out_given_in_failed")
        assert entry["error_kind"] == "ReserveDidNotConverge"

    def test_shares_length_mismatch(self, equal_pool) -> None:
        with capture_logs() as logs:
            assert api.calculate_shares(equal_pool, equal_pool[:2], EQUAL_POOL_AMP, 100_000) is None
        entry = _single_failure(logs, "stableswap_shares_failed")
        assert entry["error_kind"] == "LengthMismatch"

    @pytest.mark.parametrize(
        ("call", "event"),
        [
            (
                lambda pool: api.calculate_shares_for_amount(pool, 9, 1, 100, 1, Permill.zero()),
                "stableswap_shares_for_amount_failed",
            ),
            (
                lambda pool: api.calculate_withdraw_one_asset(pool, 1, 0, 0, 100, Permill.zero()),
                "stableswap_withdraw_one_asset_failed",
            ),
            (
                lambda pool: api.calculate_shares_for_withdrawal(pool, 0, 10_000, 100, 1, Permill.zero()),
                "stableswap_shares_for_withdrawal_failed",
            ),
        ],
    )
    def test_liquidity_failures(self, equal_pool, call, event) -> None:
        with capture_logs() as logs:
            assert call(equal_pool) is None
        _single_failure(logs, event)

    def test_programming_errors_propagate(self, equal_pool) -> None:
        """Only engine errors are absorbed."""
        with pytest.raises(TypeError):
            api.calculate_out_given_in(equal_pool, 0, 1, "2000", EQUAL_POOL_AMP)  # type: ignore[arg-type]
