"""Two-asset constant-product pool: the public operation surface."""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from simpleswap.core.errors import PoolError
from simpleswap.core.guard import Clock, ReentrancyLock, RequestGuard
from simpleswap.core.interfaces import AccountId, AssetId, AssetTransferAdapter
from simpleswap.core.invariants import check_pool_invariants
from simpleswap.core.liquidity import LiquidityEngine
from simpleswap.core.oracle import PriceOracle
from simpleswap.core.pair import AssetPair
from simpleswap.core.reserves import ReservePool
from simpleswap.core.results import (
    LiquidityReceipt,
    PoolResult,
    TradeReceipt,
    WithdrawalReceipt,
)
from simpleswap.core.shares import ShareLedger
from simpleswap.core.state import PoolState
from simpleswap.core.swap import SwapEngine, amount_out
from simpleswap.core.transfers import TransferJournal

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Pool:
    """Constant-product liquidity pool for one fixed asset pair.

    Every mutating operation is all-or-nothing: it runs under the
    reentrancy lock, and on any error the reserves and shares are restored
    from a snapshot and the external transfers already made are reversed.
    Operations return a ``PoolResult`` instead of raising ``PoolError``.

    Example:
        >>> pool = Pool("TKA", "TKB", transfers=ledger)
        >>> pool.add_liquidity("alice", "TKA", "TKB", to_wad(100), to_wad(200),
        ...                    0, 0, "alice", deadline).unwrap().shares
        141421356237309504880
    """

    def __init__(
        self,
        asset_a: AssetId,
        asset_b: AssetId,
        transfers: AssetTransferAdapter,
        clock: Optional[Clock] = None,
    ):
        self.pair = AssetPair(asset_a, asset_b)
        self._transfers = transfers
        self._guard = RequestGuard(clock)
        self._lock = ReentrancyLock()
        self._reserves = ReservePool(self.pair)
        self._shares = ShareLedger()
        self._oracle = PriceOracle(self._reserves)
        self._swap = SwapEngine(self._reserves, self._guard)
        self._liquidity = LiquidityEngine(self._reserves, self._shares, self._guard)
        logger.info("Pool created for %s/%s", asset_a, asset_b)

    @classmethod
    def from_state(
        cls,
        state: PoolState,
        transfers: AssetTransferAdapter,
        clock: Optional[Clock] = None,
    ) -> "Pool":
        """Rebuild a pool from persisted state.

        Raises:
            ValueError: If the state violates the pool invariants
        """
        report = check_pool_invariants(state)
        if not report.valid:
            raise ValueError(f"Inconsistent pool state: {'; '.join(report.errors)}")
        pool = cls(state.asset_a, state.asset_b, transfers=transfers, clock=clock)
        pool._reserves.restore((state.reserve_a, state.reserve_b))
        pool._shares.restore((state.total_shares, dict(state.share_balances)))
        return pool

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def asset_a(self) -> AssetId:
        return self.pair.asset_a

    @property
    def asset_b(self) -> AssetId:
        return self.pair.asset_b

    @property
    def reserve_a(self) -> int:
        return self._reserves.reserve_a

    @property
    def reserve_b(self) -> int:
        return self._reserves.reserve_b

    @property
    def total_shares(self) -> int:
        return self._shares.total_supply()

    @property
    def k(self) -> int:
        """The constant-product value."""
        return self._reserves.product

    def share_balance_of(self, holder: AccountId) -> int:
        return self._shares.balance_of(holder)

    def state(self) -> PoolState:
        """Snapshot of the durable state."""
        reserve_a, reserve_b = self._reserves.snapshot()
        return PoolState(
            asset_a=self.asset_a,
            asset_b=self.asset_b,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_shares=self.total_shares,
            share_balances=dict(self._shares.holders()),
        )

    def quote(self, base_asset: AssetId, quote_asset: AssetId) -> PoolResult[int]:
        """Price of one ``base_asset`` in ``quote_asset``, WAD-scaled.

        Fails with UNKNOWN_ASSET unless the two assets are the pool pair,
        and EMPTY_POOL when the base reserve is zero.
        """
        def _quote() -> int:
            self.pair.orient(base_asset, quote_asset)
            return self._oracle.quote(base_asset)

        return self._read(_quote)

    def amount_out_for(self, amount_in: int, reserve_in: int, reserve_out: int) -> PoolResult[int]:
        """Pure constant-product output for arbitrary reserves."""
        return self._read(lambda: amount_out(amount_in, reserve_in, reserve_out))

    def amount_out_for_path(self, amount_in: int, path: Sequence[AssetId]) -> PoolResult[int]:
        """Output this pool would give now for trading ``amount_in`` along ``path``."""
        def _amount() -> int:
            asset_in, _ = self._swap.resolve_path(path)
            reserve_in, reserve_out = self._reserves.oriented(asset_in)
            return amount_out(amount_in, reserve_in, reserve_out)

        return self._read(_amount)

    # ------------------------------------------------------------------
    # Mutating surface
    # ------------------------------------------------------------------

    def trade(
        self,
        sender: AccountId,
        amount_in: int,
        min_amount_out: int,
        path: Sequence[AssetId],
        recipient: AccountId,
        deadline: int,
    ) -> PoolResult[TradeReceipt]:
        """Sell exactly ``amount_in`` of ``path[0]`` for at least ``min_amount_out`` of ``path[1]``.

        Args:
            sender: Account paying ``amount_in``
            amount_in: WAD-scaled input amount
            min_amount_out: Slippage floor on the output
            path: ``[asset_in, asset_out]``
            recipient: Account receiving the output
            deadline: UNIX time after which the request is rejected

        Returns:
            PoolResult with the TradeReceipt (``amounts == [in, out]``)
        """
        return self._atomic(
            lambda journal: self._swap.execute_trade(
                journal, sender, path, amount_in, min_amount_out, recipient, deadline
            )
        )

    def add_liquidity(
        self,
        sender: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: AccountId,
        deadline: int,
    ) -> PoolResult[LiquidityReceipt]:
        """Deposit up to the desired amounts, proportionally to the reserves.

        ``asset_a``/``asset_b`` may name the pair in either order; amounts
        and the receipt follow the order given.

        Returns:
            PoolResult with the accepted amounts and shares minted
        """
        def _add(journal: TransferJournal) -> LiquidityReceipt:
            flipped = self.pair.orient(asset_a, asset_b)
            desired = (amount_a_desired, amount_b_desired)
            minimums = (amount_a_min, amount_b_min)
            if flipped:
                desired, minimums = desired[::-1], minimums[::-1]
            plan = self._liquidity.add_liquidity(
                journal, sender, *desired, *minimums, recipient, deadline
            )
            accepted = (plan.amount_b, plan.amount_a) if flipped else (plan.amount_a, plan.amount_b)
            return LiquidityReceipt(amount_a=accepted[0], amount_b=accepted[1], shares=plan.shares)

        return self._atomic(_add)

    def remove_liquidity(
        self,
        sender: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        shares: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: AccountId,
        deadline: int,
    ) -> PoolResult[WithdrawalReceipt]:
        """Burn ``shares`` of ``sender`` and pay the pro-rata reserves to ``recipient``.

        Returns:
            PoolResult with the amounts paid, in the asset order given
        """
        def _remove(journal: TransferJournal) -> WithdrawalReceipt:
            flipped = self.pair.orient(asset_a, asset_b)
            minimums = (amount_b_min, amount_a_min) if flipped else (amount_a_min, amount_b_min)
            plan = self._liquidity.remove_liquidity(
                journal, sender, shares, *minimums, recipient, deadline
            )
            paid = (plan.amount_b, plan.amount_a) if flipped else (plan.amount_a, plan.amount_b)
            return WithdrawalReceipt(amount_a=paid[0], amount_b=paid[1], shares_burned=plan.shares)

        return self._atomic(_remove)

    def transfer_shares(self, sender: AccountId, recipient: AccountId, amount: int) -> PoolResult[int]:
        """Move ownership shares between holders. Returns the amount moved."""
        def _transfer(journal: TransferJournal) -> int:
            self._shares.transfer(sender, recipient, amount)
            logger.info("Shares transferred: %s from %s to %s", amount, sender, recipient)
            return amount

        return self._atomic(_transfer)

    # ------------------------------------------------------------------
    # Execution helpers
    # ------------------------------------------------------------------

    def _read(self, query: Callable[[], T]) -> PoolResult[T]:
        try:
            return PoolResult.success(query())
        except PoolError as exc:
            return PoolResult.failure(exc)

    def _atomic(self, operation: Callable[[TransferJournal], T]) -> PoolResult[T]:
        """Run ``operation`` all-or-nothing under the reentrancy lock."""
        try:
            with self._lock.hold():
                reserves = self._reserves.snapshot()
                shares = self._shares.snapshot()
                journal = TransferJournal(self._transfers)
                try:
                    value = operation(journal)
                except PoolError:
                    self._reserves.restore(reserves)
                    self._shares.restore(shares)
                    journal.unwind()
                    raise
                except BaseException as exc:
                    self._reserves.restore(reserves)
                    self._shares.restore(shares)
                    try:
                        journal.unwind()
                    except PoolError as rollback_error:
                        logger.error(
                            "Rollback after %s incomplete: %s", type(exc).__name__, rollback_error
                        )
                    raise
        except PoolError as exc:
            logger.debug("Pool operation rejected: %s", exc)
            return PoolResult.failure(exc)
        return PoolResult.success(value)

    def __repr__(self) -> str:
        return (
            f"Pool({self.asset_a}/{self.asset_b}, reserves=({self.reserve_a}, {self.reserve_b}), "
            f"shares={self.total_shares})"
        )
