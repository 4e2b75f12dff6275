"""Arbitrageur that trades the pool back to the fair price."""

from dataclasses import dataclass
from typing import Optional

from simpleswap.core.fixed_point import WAD, isqrt, mul_div
from simpleswap.core.pool import Pool
from simpleswap.core.swap import amount_out


@dataclass
class ArbOpportunity:
    """A profitable trade against the pool at a given fair price."""
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int
    profit: int  # In units of asset B, WAD-scaled


class Arbitrageur:
    """Finds the trade that moves a fee-less pool to the fair price.

    For reserves (a, b), k = a*b and fair price p (B per A), the pool is
    at the fair price when a' = sqrt(k / p) and b' = sqrt(k * p):
    - a' > a: sell (a' - a) of A to the pool
    - a' < a: sell (b' - b) of B to the pool
    All arithmetic is integer; truncation only shrinks the trade.
    """

    def find_arb_opportunity(self, pool: Pool, fair_price: int) -> Optional[ArbOpportunity]:
        """Return the arbitrage trade at ``fair_price`` (WAD), or None.

        Args:
            pool: Pool to arbitrage
            fair_price: Price of one A in B, WAD-scaled

        Returns:
            ArbOpportunity with positive profit, or None
        """
        reserve_a, reserve_b = pool.reserve_a, pool.reserve_b
        if reserve_a == 0 or reserve_b == 0 or fair_price <= 0:
            return None

        k = reserve_a * reserve_b
        target_a = isqrt(mul_div(k, WAD, fair_price))
        if target_a > reserve_a:
            amount_in = target_a - reserve_a
            out = amount_out(amount_in, reserve_a, reserve_b)
            # Value the A paid at the fair price
            profit = out - mul_div(amount_in, fair_price, WAD)
            asset_in, asset_out = pool.asset_a, pool.asset_b
        elif target_a < reserve_a:
            target_b = isqrt(mul_div(k, fair_price, WAD))
            if target_b <= reserve_b:
                return None
            amount_in = target_b - reserve_b
            out = amount_out(amount_in, reserve_b, reserve_a)
            profit = mul_div(out, fair_price, WAD) - amount_in
            asset_in, asset_out = pool.asset_b, pool.asset_a
        else:
            return None

        if profit <= 0 or out == 0:
            return None

        return ArbOpportunity(
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=out,
            profit=profit,
        )
