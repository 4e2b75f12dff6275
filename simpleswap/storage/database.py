"""SQLite persistence for a pool and its demo asset ledger."""

import sqlite3
from pathlib import Path
from typing import Optional

from simpleswap.assets.ledger import InMemoryAssetLedger
from simpleswap.core.state import PoolState


class PoolDatabase:
    """Stores one pool's state and the balances of its asset ledger.

    Amounts are stored as decimal TEXT since WAD-scaled values overflow
    SQLite's 64-bit integers.
    """

    def __init__(self, db_path: str = "data/simpleswap.db"):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self):
        """Create tables if they don't exist."""
        conn = self._connect()
        cursor = conn.cursor()

        # Single row: id is pinned to 1
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS pool (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                asset_a TEXT NOT NULL,
                asset_b TEXT NOT NULL,
                reserve_a TEXT NOT NULL,
                reserve_b TEXT NOT NULL,
                total_shares TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS share_balances (
                holder TEXT PRIMARY KEY,
                balance TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS asset_balances (
                asset TEXT NOT NULL,
                holder TEXT NOT NULL,
                balance TEXT NOT NULL,
                PRIMARY KEY (asset, holder)
            )
        """)

        conn.commit()
        conn.close()

    def has_pool(self) -> bool:
        conn = self._connect()
        try:
            row = conn.execute("SELECT COUNT(*) FROM pool").fetchone()
        finally:
            conn.close()
        return row[0] > 0

    def save(self, state: PoolState, ledger: Optional[InMemoryAssetLedger] = None) -> None:
        """Replace the stored pool state (and ledger balances) in one transaction."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO pool
                        (id, asset_a, asset_b, reserve_a, reserve_b, total_shares, updated_at)
                    VALUES (1, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                    """,
                    (
                        state.asset_a,
                        state.asset_b,
                        str(state.reserve_a),
                        str(state.reserve_b),
                        str(state.total_shares),
                    ),
                )
                conn.execute("DELETE FROM share_balances")
                conn.executemany(
                    "INSERT INTO share_balances (holder, balance) VALUES (?, ?)",
                    [(holder, str(balance)) for holder, balance in state.share_balances.items()],
                )
                if ledger is not None:
                    conn.execute("DELETE FROM asset_balances")
                    conn.executemany(
                        "INSERT INTO asset_balances (asset, holder, balance) VALUES (?, ?, ?)",
                        [(asset, holder, str(amount)) for asset, holder, amount in ledger.balances()],
                    )
        finally:
            conn.close()

    def load_state(self) -> Optional[PoolState]:
        """Load the stored pool state, or None if no pool was initialized."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT asset_a, asset_b, reserve_a, reserve_b, total_shares FROM pool WHERE id = 1"
            ).fetchone()
            if row is None:
                return None
            holders = conn.execute("SELECT holder, balance FROM share_balances").fetchall()
        finally:
            conn.close()

        return PoolState(
            asset_a=row[0],
            asset_b=row[1],
            reserve_a=int(row[2]),
            reserve_b=int(row[3]),
            total_shares=int(row[4]),
            share_balances={holder: int(balance) for holder, balance in holders},
        )

    def load_ledger(self, custody: str) -> InMemoryAssetLedger:
        """Rebuild the asset ledger from stored balances."""
        conn = self._connect()
        try:
            rows = conn.execute("SELECT asset, holder, balance FROM asset_balances").fetchall()
        finally:
            conn.close()
        return InMemoryAssetLedger(
            custody=custody,
            balances=[(asset, holder, int(balance)) for asset, holder, balance in rows],
        )
