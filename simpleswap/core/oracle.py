"""Spot price queries over pool reserves."""

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import WAD, mul_div
from simpleswap.core.interfaces import AssetId
from simpleswap.core.reserves import ReservePool


class PriceOracle:
    """Read-only instantaneous price of one pool asset in the other."""

    def __init__(self, reserves: ReservePool):
        self._reserves = reserves

    def quote(self, base_asset: AssetId) -> int:
        """Price of one unit of ``base_asset`` in the other asset, WAD-scaled.

        Computed as ``other_reserve * 10**18 // base_reserve``; a pool with
        reserves (100, 200) quotes side A at 2 * 10**18.

        Raises:
            PoolError: UNKNOWN_ASSET if ``base_asset`` is not in the pair,
                EMPTY_POOL if its reserve is zero
        """
        base_reserve, other_reserve = self._reserves.oriented(base_asset)
        if base_reserve == 0:
            raise PoolError(ErrorKind.EMPTY_POOL, f"no {base_asset} reserve to price against")
        return mul_div(other_reserve, WAD, base_reserve)
