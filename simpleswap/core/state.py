"""Durable pool state layout."""

from dataclasses import dataclass, field
from typing import Any

from simpleswap.core.interfaces import AccountId, AssetId


@dataclass(frozen=True)
class PoolState:
    """Everything a pool persists: pair, reserves, shares.

    Amounts are WAD-scaled ints. ``share_balances`` omits zero holders.
    """
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: int = 0
    reserve_b: int = 0
    total_shares: int = 0
    share_balances: dict[AccountId, int] = field(default_factory=dict)

    @property
    def product(self) -> int:
        return self.reserve_a * self.reserve_b

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form; ints are written as strings to survive 64-bit readers."""
        return {
            "asset_a": self.asset_a,
            "asset_b": self.asset_b,
            "reserve_a": str(self.reserve_a),
            "reserve_b": str(self.reserve_b),
            "total_shares": str(self.total_shares),
            "share_balances": {holder: str(v) for holder, v in sorted(self.share_balances.items())},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PoolState":
        return cls(
            asset_a=data["asset_a"],
            asset_b=data["asset_b"],
            reserve_a=int(data["reserve_a"]),
            reserve_b=int(data["reserve_b"]),
            total_shares=int(data["total_shares"]),
            share_balances={h: int(v) for h, v in data.get("share_balances", {}).items()},
        )
