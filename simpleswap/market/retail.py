"""Uninformed retail order flow."""

from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

from simpleswap.market.price_process import price_to_wad


@dataclass
class RetailOrder:
    """An exact-input retail order against the pool."""
    side: Literal["a_to_b", "b_to_a"]  # Which asset the trader pays
    amount_in: int                      # WAD-scaled input amount


class RetailTrader:
    """Draws the retail orders arriving at the pool each step.

    Order count per step is Poisson(arrival_rate). Sizes are lognormal in
    whole units of the paid asset with mean ``mean_size``; an order pays
    asset A with probability ``buy_prob``.
    """

    def __init__(
        self,
        arrival_rate: float = 1.0,
        mean_size: float = 1.0,
        size_sigma: float = 1.2,
        buy_prob: float = 0.5,
        seed: Optional[int] = None,
    ):
        self.arrival_rate = arrival_rate
        self.buy_prob = buy_prob
        self._size_sigma = max(size_sigma, 0.01)
        # Log-space mean that gives E[size] == mean_size
        self._size_mu = float(np.log(max(mean_size, 0.01))) - 0.5 * self._size_sigma ** 2
        self._rng = np.random.default_rng(seed)

    def generate_orders(self) -> list[RetailOrder]:
        """Orders for one step, possibly none. Sizes below one WAD unit are dropped."""
        count = int(self._rng.poisson(self.arrival_rate))
        sizes = self._rng.lognormal(self._size_mu, self._size_sigma, size=count)
        pays_a = self._rng.random(count) < self.buy_prob

        orders = []
        for size, side_a in zip(sizes, pays_a):
            amount_in = price_to_wad(float(size))
            if amount_in:
                orders.append(RetailOrder(side="a_to_b" if side_a else "b_to_a", amount_in=amount_in))
        return orders
