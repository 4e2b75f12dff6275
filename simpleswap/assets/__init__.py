"""Asset ledgers the pool can transfer through."""

from simpleswap.assets.ledger import POOL_CUSTODY, InMemoryAssetLedger

__all__ = [
    "InMemoryAssetLedger",
    "POOL_CUSTODY",
]
