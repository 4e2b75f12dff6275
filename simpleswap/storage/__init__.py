"""Persistence for pool and ledger state."""

from simpleswap.storage.database import PoolDatabase

__all__ = [
    "PoolDatabase",
]
