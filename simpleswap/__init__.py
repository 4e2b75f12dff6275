"""SimpleSwap: a two-asset constant-product liquidity pool."""

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import WAD, from_wad, to_wad
from simpleswap.core.pool import Pool
from simpleswap.core.results import PoolResult

__all__ = [
    "ErrorKind",
    "Pool",
    "PoolError",
    "PoolResult",
    "WAD",
    "from_wad",
    "to_wad",
]
