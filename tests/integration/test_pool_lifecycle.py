"""End-to-end pool scenarios driven from parsed snapshots.

A pool is bootstrapped, topped up, traded against and drained through the
package-level entry points, the way a settlement layer would use them.
"""

from stableswap import (
    PoolSnapshot,
    calculate_d,
    calculate_out_given_in,
    calculate_shares,
    calculate_shares_for_amount,
    calculate_withdraw_one_asset,
)
from tests.helpers import EQUAL_POOL_BOOTSTRAP_SHARES, EQUAL_POOL_DEPOSITED, make_reserves


def _snapshot(amounts, issuance, fee=0):
    return PoolSnapshot.model_validate(
        {
            "reserves": [{"amount": str(a), "decimals": 12} for a in amounts],
            "amplification": "100",
            "fee": fee,
            "share_issuance": str(issuance),
        }
    )


class TestPoolLifecycle:
    """Deposit, trade and withdraw against one evolving pool."""

    def test_bootstrap_mints_invariant(self) -> None:
        empty = _snapshot([0] * 5, 0)
        updated = make_reserves(EQUAL_POOL_DEPOSITED)

        minted = calculate_shares(empty.to_reserves(), updated, empty.amplification, empty.share_issuance)

        assert minted == EQUAL_POOL_BOOTSTRAP_SHARES
        assert minted == calculate_d(updated, empty.amplification) - 2

    def test_deposit_then_withdraw_loses_rounding_only(self) -> None:
        pool = _snapshot([10_000] * 5, 100_000)
        reserves = pool.to_reserves()

        minted = calculate_shares_for_amount(
            reserves, 2, 5_000, pool.amplification, pool.share_issuance, pool.fee_fraction
        )
        assert minted == 9_999

        after_deposit = _snapshot([10_000, 10_000, 15_000, 10_000, 10_000], pool.share_issuance + minted)
        amount, fee = calculate_withdraw_one_asset(
            after_deposit.to_reserves(),
            minted,
            2,
            after_deposit.share_issuance,
            after_deposit.amplification,
            after_deposit.fee_fraction,
        )

        assert (amount, fee) == (4_999, 0)
        assert amount < 5_000

    def test_trade_grows_value_per_share(self) -> None:
        """Fees retained by the pool raise D while issuance stays fixed."""
        pool = _snapshot([10_000] * 5, 100_000, fee=3_000)
        reserves = pool.to_reserves()
        d_before = calculate_d(reserves, pool.amplification)

        gross = calculate_out_given_in(reserves, 2, 4, 2_000, pool.amplification)
        fee = pool.fee_fraction.mul_floor(gross)
        after_trade = _snapshot([10_000, 10_000, 12_000, 10_000, 10_000 - (gross - fee)], 100_000)

        assert calculate_d(after_trade.to_reserves(), pool.amplification) > d_before
