"""Constant-product trade math and execution."""

import logging
from typing import Sequence

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import require_amount
from simpleswap.core.guard import RequestGuard
from simpleswap.core.interfaces import AccountId, AssetId
from simpleswap.core.reserves import ReservePool
from simpleswap.core.results import TradeReceipt
from simpleswap.core.transfers import TransferJournal

logger = logging.getLogger(__name__)


def amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Output of a fee-less constant-product trade.

    amount_out = floor(amount_in * reserve_out / (reserve_in + amount_in))

    Truncation always favors the pool, so the reserve product never
    decreases. The result is strictly less than ``reserve_out``.

    Args:
        amount_in: WAD-scaled input amount
        reserve_in: Reserve of the input asset
        reserve_out: Reserve of the output asset

    Returns:
        WAD-scaled output amount

    Raises:
        PoolError: ZERO_INPUT if ``amount_in`` is 0, ZERO_RESERVE if either
            reserve is 0
    """
    require_amount("amount_in", amount_in)
    require_amount("reserve_in", reserve_in)
    require_amount("reserve_out", reserve_out)
    if amount_in == 0:
        raise PoolError(ErrorKind.ZERO_INPUT, "amount_in is zero")
    if reserve_in == 0 or reserve_out == 0:
        raise PoolError(ErrorKind.ZERO_RESERVE, f"reserves are ({reserve_in}, {reserve_out})")
    return (amount_in * reserve_out) // (reserve_in + amount_in)


class SwapEngine:
    """Executes exact-input trades along a two-asset path."""

    def __init__(self, reserves: ReservePool, guard: RequestGuard):
        self._reserves = reserves
        self._guard = guard

    def resolve_path(self, path: Sequence[AssetId]) -> tuple[AssetId, AssetId]:
        """Validate ``path`` and return ``(asset_in, asset_out)``.

        Raises:
            PoolError: INVALID_PATH unless the path is exactly [in, out] with
                ``out`` the other pool asset; UNKNOWN_ASSET if ``in`` is not
                a pool asset
        """
        if len(path) != 2:
            raise PoolError(ErrorKind.INVALID_PATH, f"path must have 2 assets, got {len(path)}")
        asset_in, asset_out = path
        expected_out = self._reserves.pair.other(asset_in)
        if asset_out != expected_out:
            raise PoolError(
                ErrorKind.INVALID_PATH,
                f"{asset_in!r} trades only for {expected_out!r}, not {asset_out!r}",
            )
        return asset_in, asset_out

    def execute_trade(
        self,
        transfers: TransferJournal,
        sender: AccountId,
        path: Sequence[AssetId],
        amount_in: int,
        min_amount_out: int,
        recipient: AccountId,
        deadline: int,
    ) -> TradeReceipt:
        """Trade ``amount_in`` of ``path[0]`` for ``path[1]``.

        Must run inside the pool's atomic section: on any error the caller
        restores reserves and unwinds ``transfers``.

        Raises:
            PoolError: EXPIRED, INVALID_PATH, UNKNOWN_ASSET, TRANSFER_FAILED,
                ZERO_INPUT, ZERO_RESERVE or INSUFFICIENT_OUTPUT_AMOUNT
        """
        require_amount("amount_in", amount_in)
        require_amount("min_amount_out", min_amount_out)
        self._guard.check_deadline(deadline)
        asset_in, asset_out = self.resolve_path(path)

        transfers.debit(asset_in, sender, amount_in)

        reserve_in, reserve_out = self._reserves.oriented(asset_in)
        out = amount_out(amount_in, reserve_in, reserve_out)
        if out < min_amount_out:
            raise PoolError(
                ErrorKind.INSUFFICIENT_OUTPUT_AMOUNT,
                f"output {out} below minimum {min_amount_out}",
            )

        self._reserves.apply_trade(asset_in, amount_in, out)
        transfers.credit(asset_out, recipient, out)

        logger.info(
            "Swap %s: %s %s -> %s %s to %s",
            sender, amount_in, asset_in, out, asset_out, recipient,
        )
        return TradeReceipt(
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=out,
            recipient=recipient,
        )
