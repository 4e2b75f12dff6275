"""Pytest configuration and shared fixtures for pool tests.

This module provides:
- Pytest markers for test categorization
- Fixtures for ledgers, clocks and the (100 TKA, 200 TKB) reference pool
"""

import pytest

from simpleswap.assets.ledger import InMemoryAssetLedger
from simpleswap.core.pool import Pool
from tests.fixtures.pool_fixtures import (
    FixedClock,
    create_pool,
    create_seeded_pool,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "invariant: Reserve/share invariant and rounding-direction tests"
    )
    config.addinivalue_line(
        "markers", "edge_case: Edge case tests with adversarial inputs"
    )
    config.addinivalue_line(
        "markers", "integration: Tests spanning storage, CLI or simulation"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location and name."""
    for item in items:
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)

        if any(keyword in item.nodeid for keyword in ["invariant", "atomicity"]):
            item.add_marker(pytest.mark.invariant)

        if any(keyword in item.nodeid for keyword in ["cli", "database", "simulation"]):
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Pool Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to a fixed UNIX time; tests may move it."""
    return FixedClock()


@pytest.fixture
def ledger() -> InMemoryAssetLedger:
    """Empty in-memory asset ledger with the default pool custody account."""
    return InMemoryAssetLedger()


@pytest.fixture
def empty_pool(ledger: InMemoryAssetLedger, clock: FixedClock) -> Pool:
    """TKA/TKB pool with no liquidity."""
    return create_pool(ledger, clock)


@pytest.fixture
def pool(ledger: InMemoryAssetLedger, clock: FixedClock) -> Pool:
    """Reference pool: owner deposited 100 TKA + 200 TKB; owner and addr1 funded."""
    return create_seeded_pool(ledger, clock)
