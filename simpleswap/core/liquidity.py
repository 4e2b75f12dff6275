"""Deposit and withdrawal share math."""

import logging
from dataclasses import dataclass

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import isqrt, mul_div, require_amount
from simpleswap.core.guard import RequestGuard
from simpleswap.core.interfaces import AccountId
from simpleswap.core.reserves import ReservePool
from simpleswap.core.shares import ShareLedger
from simpleswap.core.transfers import TransferJournal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositPlan:
    """Accepted amounts and shares for a deposit, in pool (A, B) order."""
    amount_a: int
    amount_b: int
    shares: int


@dataclass(frozen=True)
class WithdrawalPlan:
    """Amounts released for burning ``shares``, in pool (A, B) order."""
    amount_a: int
    amount_b: int
    shares: int


def optimal_amounts(
    amount_a_desired: int,
    amount_b_desired: int,
    reserve_a: int,
    reserve_b: int,
) -> tuple[int, int]:
    """Largest pair within the desired amounts proportional to the reserves.

    Tries to use all of A first; if the B needed for that exceeds the
    desired B, uses all of B instead.
    """
    optimal_b = mul_div(amount_a_desired, reserve_b, reserve_a)
    if optimal_b <= amount_b_desired:
        return amount_a_desired, optimal_b
    optimal_a = mul_div(amount_b_desired, reserve_a, reserve_b)
    return optimal_a, amount_b_desired


def plan_deposit(
    amount_a_desired: int,
    amount_b_desired: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> DepositPlan:
    """Work out what a deposit accepts and mints, without checking minimums.

    Raises:
        PoolError: INSUFFICIENT_INITIAL_LIQUIDITY if a first deposit mints
            nothing, ZERO_RESERVE if shares exist but a reserve is empty,
            ZERO_INPUT if a later deposit mints nothing
    """
    if total_shares == 0:
        shares = isqrt(amount_a_desired * amount_b_desired)
        if shares == 0:
            raise PoolError(
                ErrorKind.INSUFFICIENT_INITIAL_LIQUIDITY,
                f"deposit ({amount_a_desired}, {amount_b_desired}) mints no shares",
            )
        return DepositPlan(amount_a_desired, amount_b_desired, shares)

    if reserve_a == 0 or reserve_b == 0:
        raise PoolError(ErrorKind.ZERO_RESERVE, f"reserves are ({reserve_a}, {reserve_b})")

    amount_a, amount_b = optimal_amounts(amount_a_desired, amount_b_desired, reserve_a, reserve_b)
    shares = min(
        mul_div(amount_a, total_shares, reserve_a),
        mul_div(amount_b, total_shares, reserve_b),
    )
    if shares == 0:
        raise PoolError(
            ErrorKind.ZERO_INPUT,
            f"deposit ({amount_a}, {amount_b}) is too small to mint shares",
        )
    return DepositPlan(amount_a, amount_b, shares)


def plan_withdrawal(shares: int, reserve_a: int, reserve_b: int, total_shares: int) -> WithdrawalPlan:
    """Pro-rata reserves for ``shares``, truncated toward the pool."""
    return WithdrawalPlan(
        amount_a=mul_div(shares, reserve_a, total_shares),
        amount_b=mul_div(shares, reserve_b, total_shares),
        shares=shares,
    )


class LiquidityEngine:
    """Applies deposits and withdrawals to the reserves and share ledger.

    Amounts are in pool (A, B) order; the public surface reorders them for
    callers that name the pair the other way round.
    """

    def __init__(self, reserves: ReservePool, shares: ShareLedger, guard: RequestGuard):
        self._reserves = reserves
        self._shares = shares
        self._guard = guard

    def add_liquidity(
        self,
        transfers: TransferJournal,
        sender: AccountId,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: AccountId,
        deadline: int,
    ) -> DepositPlan:
        """Deposit a reserve-proportional pair and mint shares to ``recipient``.

        Raises:
            PoolError: EXPIRED, INSUFFICIENT_INITIAL_LIQUIDITY, ZERO_INPUT,
                ZERO_RESERVE, BELOW_MINIMUM_A, BELOW_MINIMUM_B,
                TRANSFER_FAILED or OVERFLOW
        """
        for name, value in (
            ("amount_a_desired", amount_a_desired),
            ("amount_b_desired", amount_b_desired),
            ("amount_a_min", amount_a_min),
            ("amount_b_min", amount_b_min),
        ):
            require_amount(name, value)
        self._guard.check_deadline(deadline)

        plan = plan_deposit(
            amount_a_desired,
            amount_b_desired,
            self._reserves.reserve_a,
            self._reserves.reserve_b,
            self._shares.total_supply(),
        )
        if plan.amount_a < amount_a_min:
            raise PoolError(
                ErrorKind.BELOW_MINIMUM_A,
                f"accepted {plan.amount_a} below minimum {amount_a_min}",
            )
        if plan.amount_b < amount_b_min:
            raise PoolError(
                ErrorKind.BELOW_MINIMUM_B,
                f"accepted {plan.amount_b} below minimum {amount_b_min}",
            )

        pair = self._reserves.pair
        transfers.debit(pair.asset_a, sender, plan.amount_a)
        transfers.debit(pair.asset_b, sender, plan.amount_b)
        self._reserves.apply_delta(plan.amount_a, plan.amount_b)
        self._shares.mint(recipient, plan.shares)

        logger.info(
            "Liquidity added by %s: %s %s + %s %s -> %s shares to %s",
            sender, plan.amount_a, pair.asset_a, plan.amount_b, pair.asset_b,
            plan.shares, recipient,
        )
        return plan

    def remove_liquidity(
        self,
        transfers: TransferJournal,
        sender: AccountId,
        shares: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: AccountId,
        deadline: int,
    ) -> WithdrawalPlan:
        """Burn ``sender``'s shares and pay the pro-rata reserves to ``recipient``.

        Raises:
            PoolError: EXPIRED, ZERO_INPUT, INSUFFICIENT_SHARES,
                BELOW_MINIMUM_A, BELOW_MINIMUM_B or TRANSFER_FAILED
        """
        require_amount("shares", shares)
        require_amount("amount_a_min", amount_a_min)
        require_amount("amount_b_min", amount_b_min)
        self._guard.check_deadline(deadline)

        if shares == 0:
            raise PoolError(ErrorKind.ZERO_INPUT, "shares is zero")
        held = self._shares.balance_of(sender)
        if held < shares:
            raise PoolError(ErrorKind.INSUFFICIENT_SHARES, f"{sender} holds {held} shares, needs {shares}")

        plan = plan_withdrawal(
            shares,
            self._reserves.reserve_a,
            self._reserves.reserve_b,
            self._shares.total_supply(),
        )
        if plan.amount_a < amount_a_min:
            raise PoolError(
                ErrorKind.BELOW_MINIMUM_A,
                f"withdrawal {plan.amount_a} below minimum {amount_a_min}",
            )
        if plan.amount_b < amount_b_min:
            raise PoolError(
                ErrorKind.BELOW_MINIMUM_B,
                f"withdrawal {plan.amount_b} below minimum {amount_b_min}",
            )

        self._shares.burn(sender, shares)
        self._reserves.apply_delta(-plan.amount_a, -plan.amount_b)
        pair = self._reserves.pair
        transfers.credit(pair.asset_a, recipient, plan.amount_a)
        transfers.credit(pair.asset_b, recipient, plan.amount_b)

        logger.info(
            "Liquidity removed by %s: %s shares -> %s %s + %s %s to %s",
            sender, shares, plan.amount_a, pair.asset_a, plan.amount_b, pair.asset_b, recipient,
        )
        return plan
