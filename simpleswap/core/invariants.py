"""Consistency checks for pool state."""

from dataclasses import dataclass, field

from simpleswap.core.fixed_point import MAX_AMOUNT
from simpleswap.core.state import PoolState


@dataclass
class InvariantReport:
    """Result of checking a pool state."""
    valid: bool
    errors: list[str] = field(default_factory=list)


def check_pool_invariants(state: PoolState) -> InvariantReport:
    """Check the reserve/share invariants of ``state``.

    - reserves are both zero exactly when no shares are outstanding
    - share balances sum to the total supply
    - every quantity is within [0, MAX_AMOUNT]
    """
    errors = []

    for name in ("reserve_a", "reserve_b", "total_shares"):
        value = getattr(state, name)
        if value < 0 or value > MAX_AMOUNT:
            errors.append(f"{name}={value} outside [0, {MAX_AMOUNT}]")

    reserves_empty = state.reserve_a == 0 and state.reserve_b == 0
    if reserves_empty != (state.total_shares == 0):
        errors.append(
            f"reserves ({state.reserve_a}, {state.reserve_b}) inconsistent "
            f"with total_shares={state.total_shares}"
        )

    negative = [holder for holder, balance in state.share_balances.items() if balance <= 0]
    if negative:
        errors.append(f"non-positive share balances for {sorted(negative)}")

    balance_sum = sum(state.share_balances.values())
    if balance_sum != state.total_shares:
        errors.append(f"share balances sum to {balance_sum}, total_shares={state.total_shares}")

    return InvariantReport(valid=not errors, errors=errors)


def check_trade_product(product_before: int, product_after: int) -> InvariantReport:
    """A trade must never decrease ``reserve_a * reserve_b``."""
    if product_after < product_before:
        return InvariantReport(
            valid=False,
            errors=[f"reserve product fell from {product_before} to {product_after}"],
        )
    return InvariantReport(valid=True)
