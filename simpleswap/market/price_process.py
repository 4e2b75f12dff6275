"""Fair-price path for the simulated market."""

from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Optional

import numpy as np

from simpleswap.core.fixed_point import DECIMALS, to_wad

_WAD_QUANTUM = Decimal(1).scaleb(-DECIMALS)


def price_to_wad(price: float) -> int:
    """Truncate a float price to 18 decimals and scale it to a WAD int."""
    with localcontext() as ctx:
        ctx.prec = 80
        return to_wad(Decimal(str(price)).quantize(_WAD_QUANTUM, rounding=ROUND_DOWN))


class GBMPriceProcess:
    """Fair price of asset A in asset B following geometric Brownian motion.

    Each step multiplies the price by exp((mu - sigma^2 / 2) * dt + sigma * sqrt(dt) * Z)
    with Z standard normal. The float path stays internal; callers only
    see WAD ints, which is what the pool and the arbitrageur work in.
    """

    def __init__(
        self,
        initial_price: float,
        mu: float = 0.0,
        sigma: float = 0.001,
        dt: float = 1.0,
        seed: Optional[int] = None,
    ):
        if initial_price <= 0:
            raise ValueError(f"initial_price must be > 0, got {initial_price}")
        self._price = float(initial_price)
        self._log_drift = (mu - 0.5 * sigma ** 2) * dt
        self._log_scale = sigma * float(np.sqrt(dt))
        self._rng = np.random.default_rng(seed)

    @property
    def current_price(self) -> int:
        return price_to_wad(self._price)

    def step(self) -> int:
        """Advance one step and return the new fair price as a WAD int."""
        shock = self._log_scale * self._rng.standard_normal()
        self._price *= float(np.exp(self._log_drift + shock))
        return self.current_price
