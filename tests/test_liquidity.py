"""Tests for deposits, withdrawals and share math."""

import pytest

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import WAD, isqrt
from simpleswap.core.liquidity import optimal_amounts, plan_deposit, plan_withdrawal
from tests.fixtures.pool_fixtures import (
    DEADLINE,
    INITIAL_SHARES,
    NOW,
    OWNER,
    TKA,
    TKB,
    TRADER,
    fund,
    snapshot_pool,
    wad,
)


class TestFirstDeposit:
    def test_mints_integer_square_root(self, pool):
        assert INITIAL_SHARES == isqrt(wad(100) * wad(200))
        assert pool.total_shares == INITIAL_SHARES
        assert pool.share_balance_of(OWNER) == pool.total_shares

    def test_receipt_and_reserves(self, empty_pool, ledger):
        fund(ledger, OWNER)
        result = empty_pool.add_liquidity(OWNER, TKA, TKB, wad(100), wad(200), 0, 0, OWNER, DEADLINE)

        assert result.ok
        assert (result.value.amount_a, result.value.amount_b) == (wad(100), wad(200))
        assert result.value.shares == INITIAL_SHARES
        assert (empty_pool.reserve_a, empty_pool.reserve_b) == (wad(100), wad(200))
        assert ledger.balance_of(TKA, ledger.custody) == wad(100)

    @pytest.mark.parametrize("amounts", [(0, 0), (wad(1), 0), (0, wad(1))])
    def test_zero_product_is_insufficient(self, empty_pool, ledger, amounts):
        fund(ledger, OWNER)
        result = empty_pool.add_liquidity(OWNER, TKA, TKB, *amounts, 0, 0, OWNER, DEADLINE)
        assert result.kind is ErrorKind.INSUFFICIENT_INITIAL_LIQUIDITY
        assert empty_pool.total_shares == 0
        assert ledger.balance_of(TKA, OWNER) == 1000 * WAD

    def test_shares_go_to_recipient(self, empty_pool, ledger):
        fund(ledger, OWNER)
        empty_pool.add_liquidity(OWNER, TKA, TKB, wad(4), wad(9), 0, 0, "vault", DEADLINE).unwrap()
        assert empty_pool.share_balance_of("vault") == wad(6)
        assert empty_pool.share_balance_of(OWNER) == 0


class TestSubsequentDeposit:
    def test_proportional_deposit_adds_exact_amounts(self, pool):
        result = pool.add_liquidity(OWNER, TKA, TKB, wad(50), wad(100), 10, 10, OWNER, DEADLINE)

        assert result.ok
        assert (pool.reserve_a, pool.reserve_b) == (wad(150), wad(300))
        assert result.value.shares == INITIAL_SHARES // 2
        assert pool.total_shares == INITIAL_SHARES + INITIAL_SHARES // 2

    def test_excess_b_is_not_taken(self, pool, ledger):
        before_b = ledger.balance_of(TKB, TRADER)
        receipt = pool.add_liquidity(TRADER, TKA, TKB, wad(10), wad(50), 0, 0, TRADER, DEADLINE).unwrap()

        assert (receipt.amount_a, receipt.amount_b) == (wad(10), wad(20))
        assert ledger.balance_of(TKB, TRADER) == before_b - wad(20)

    def test_excess_a_is_not_taken(self, pool):
        receipt = pool.add_liquidity(TRADER, TKA, TKB, wad(50), wad(20), 0, 0, TRADER, DEADLINE).unwrap()
        assert (receipt.amount_a, receipt.amount_b) == (wad(10), wad(20))

    def test_reserve_ratio_preserved_after_trades(self, pool):
        pool.trade(TRADER, wad(7), 0, [TKA, TKB], TRADER, DEADLINE).unwrap()
        ratio_before = (pool.reserve_a, pool.reserve_b)
        pool.add_liquidity(TRADER, TKA, TKB, wad(13), wad(500), 0, 0, TRADER, DEADLINE).unwrap()

        # a'/b' == a/b up to one unit of truncation on the derived side
        a0, b0 = ratio_before
        a1, b1 = pool.reserve_a, pool.reserve_b
        assert abs(a1 * b0 - b1 * a0) <= a0

    def test_reversed_pair_order(self, pool):
        receipt = pool.add_liquidity(TRADER, TKB, TKA, wad(100), wad(50), 0, 0, TRADER, DEADLINE).unwrap()
        assert (receipt.amount_a, receipt.amount_b) == (wad(100), wad(50))
        assert (pool.reserve_a, pool.reserve_b) == (wad(150), wad(300))

    def test_minimums(self, pool, ledger):
        before = snapshot_pool(pool, ledger)
        result = pool.add_liquidity(TRADER, TKA, TKB, wad(10), wad(50), 0, wad(21), TRADER, DEADLINE)
        assert result.kind is ErrorKind.BELOW_MINIMUM_B

        result = pool.add_liquidity(TRADER, TKA, TKB, wad(50), wad(20), wad(11), 0, TRADER, DEADLINE)
        assert result.kind is ErrorKind.BELOW_MINIMUM_A
        assert snapshot_pool(pool, ledger) == before

    def test_dust_deposit_minting_nothing(self, pool):
        result = pool.add_liquidity(TRADER, TKA, TKB, 1, 1, 0, 0, TRADER, DEADLINE)
        assert result.kind is ErrorKind.ZERO_INPUT

    def test_unknown_pair(self, pool):
        result = pool.add_liquidity(TRADER, TKA, "XYZ", wad(1), wad(1), 0, 0, TRADER, DEADLINE)
        assert result.kind is ErrorKind.UNKNOWN_ASSET

    def test_expired(self, pool, ledger):
        before = snapshot_pool(pool, ledger)
        result = pool.add_liquidity(TRADER, TKA, TKB, wad(1), wad(2), 0, 0, TRADER, NOW - 1)
        assert result.kind is ErrorKind.EXPIRED
        assert snapshot_pool(pool, ledger) == before


class TestRemoveLiquidity:
    def test_remove_half_of_sole_holder(self, pool, ledger):
        balance_a = ledger.balance_of(TKA, OWNER)
        balance_b = ledger.balance_of(TKB, OWNER)
        half = pool.share_balance_of(OWNER) // 2

        receipt = pool.remove_liquidity(OWNER, TKA, TKB, half, 0, 0, OWNER, DEADLINE).unwrap()

        assert (receipt.amount_a, receipt.amount_b) == (wad(50), wad(100))
        assert pool.total_shares == INITIAL_SHARES - half
        assert (pool.reserve_a, pool.reserve_b) == (wad(50), wad(100))
        assert ledger.balance_of(TKA, OWNER) == balance_a + wad(50)
        assert ledger.balance_of(TKB, OWNER) == balance_b + wad(100)

    def test_remove_everything_empties_pool(self, pool):
        receipt = pool.remove_liquidity(OWNER, TKA, TKB, INITIAL_SHARES, 0, 0, OWNER, DEADLINE).unwrap()
        assert (receipt.amount_a, receipt.amount_b) == (wad(100), wad(200))
        assert (pool.reserve_a, pool.reserve_b, pool.total_shares) == (0, 0, 0)

        # A fresh first deposit is accepted at any ratio
        again = pool.add_liquidity(OWNER, TKA, TKB, wad(1), wad(4), 0, 0, OWNER, DEADLINE).unwrap()
        assert again.shares == wad(2)

    def test_round_trip_never_returns_more(self, pool, ledger):
        pool.trade(TRADER, wad(3), 0, [TKB, TKA], TRADER, DEADLINE).unwrap()
        deposit = pool.add_liquidity(TRADER, TKA, TKB, wad("1.234567"), wad(99), 0, 0, TRADER, DEADLINE).unwrap()
        withdrawal = pool.remove_liquidity(
            TRADER, TKA, TKB, deposit.shares, 0, 0, TRADER, DEADLINE
        ).unwrap()

        assert withdrawal.amount_a <= deposit.amount_a
        assert withdrawal.amount_b <= deposit.amount_b

    def test_insufficient_shares(self, pool, ledger):
        before = snapshot_pool(pool, ledger)
        result = pool.remove_liquidity(TRADER, TKA, TKB, 1, 0, 0, TRADER, DEADLINE)
        assert result.kind is ErrorKind.INSUFFICIENT_SHARES
        assert snapshot_pool(pool, ledger) == before

    def test_zero_shares(self, pool):
        result = pool.remove_liquidity(OWNER, TKA, TKB, 0, 0, 0, OWNER, DEADLINE)
        assert result.kind is ErrorKind.ZERO_INPUT

    def test_minimums(self, pool):
        half = INITIAL_SHARES // 2
        result = pool.remove_liquidity(OWNER, TKA, TKB, half, wad(50) + 1, 0, OWNER, DEADLINE)
        assert result.kind is ErrorKind.BELOW_MINIMUM_A
        result = pool.remove_liquidity(OWNER, TKA, TKB, half, 0, wad(100) + 1, OWNER, DEADLINE)
        assert result.kind is ErrorKind.BELOW_MINIMUM_B
        assert pool.total_shares == INITIAL_SHARES

    def test_reversed_pair_order(self, pool):
        half = INITIAL_SHARES // 2
        receipt = pool.remove_liquidity(OWNER, TKB, TKA, half, wad(100), wad(50), OWNER, DEADLINE).unwrap()
        assert (receipt.amount_a, receipt.amount_b) == (wad(100), wad(50))

    def test_expired(self, pool):
        result = pool.remove_liquidity(OWNER, TKA, TKB, 1, 0, 0, OWNER, NOW - 1)
        assert result.kind is ErrorKind.EXPIRED
        assert pool.total_shares == INITIAL_SHARES


class TestShareTransfer:
    def test_transferred_shares_can_be_redeemed(self, pool):
        pool.transfer_shares(OWNER, TRADER, INITIAL_SHARES // 2).unwrap()
        assert pool.share_balance_of(TRADER) == INITIAL_SHARES // 2

        receipt = pool.remove_liquidity(TRADER, TKA, TKB, INITIAL_SHARES // 2, 0, 0, TRADER, DEADLINE).unwrap()
        assert (receipt.amount_a, receipt.amount_b) == (wad(50), wad(100))

    def test_transfer_more_than_held(self, pool):
        result = pool.transfer_shares(TRADER, OWNER, 1)
        assert result.kind is ErrorKind.INSUFFICIENT_SHARES


class TestPlanning:
    def test_optimal_amounts(self):
        assert optimal_amounts(wad(50), wad(100), wad(100), wad(200)) == (wad(50), wad(100))
        assert optimal_amounts(wad(50), wad(60), wad(100), wad(200)) == (wad(30), wad(60))

    def test_plan_deposit_takes_smaller_share_count(self):
        plan = plan_deposit(10, 25, 100, 200, 1000)
        # optimal_b = 20 <= 25, shares = min(10*1000//100, 20*1000//200)
        assert (plan.amount_a, plan.amount_b, plan.shares) == (10, 20, 100)

    def test_plan_deposit_with_shares_but_empty_reserve(self):
        with pytest.raises(PoolError) as exc_info:
            plan_deposit(10, 10, 0, 100, 1000)
        assert exc_info.value.kind is ErrorKind.ZERO_RESERVE

    def test_plan_withdrawal_truncates(self):
        plan = plan_withdrawal(1, 10, 20, 3)
        assert (plan.amount_a, plan.amount_b) == (3, 6)
