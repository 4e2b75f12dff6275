"""Core pool components."""

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.interfaces import AssetTransferAdapter, TransferReceipt
from simpleswap.core.pool import Pool
from simpleswap.core.results import (
    LiquidityReceipt,
    PoolResult,
    TradeReceipt,
    WithdrawalReceipt,
)
from simpleswap.core.state import PoolState
from simpleswap.core.swap import amount_out

__all__ = [
    "AssetTransferAdapter",
    "ErrorKind",
    "LiquidityReceipt",
    "Pool",
    "PoolError",
    "PoolResult",
    "PoolState",
    "TradeReceipt",
    "TransferReceipt",
    "WithdrawalReceipt",
    "amount_out",
]
