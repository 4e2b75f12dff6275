"""Test fixtures for pool testing."""

from tests.fixtures.pool_fixtures import (
    DEADLINE,
    INITIAL_SHARES,
    NOW,
    OWNER,
    TKA,
    TKB,
    TRADER,
    CallbackLedger,
    FailingLedger,
    FixedClock,
    PoolSnapshot,
    create_pool,
    create_seeded_pool,
    fund,
    snapshot_pool,
    wad,
)

__all__ = [
    "DEADLINE",
    "INITIAL_SHARES",
    "NOW",
    "OWNER",
    "TKA",
    "TKB",
    "TRADER",
    "CallbackLedger",
    "FailingLedger",
    "FixedClock",
    "PoolSnapshot",
    "create_pool",
    "create_seeded_pool",
    "fund",
    "snapshot_pool",
    "wad",
]
