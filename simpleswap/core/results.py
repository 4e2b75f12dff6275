"""Receipts and the tagged result returned by the public pool surface."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.interfaces import AccountId, AssetId

T = TypeVar("T")


@dataclass(frozen=True)
class TradeReceipt:
    """An executed trade. Amounts are WAD-scaled."""
    asset_in: AssetId
    asset_out: AssetId
    amount_in: int
    amount_out: int
    recipient: AccountId

    @property
    def amounts(self) -> list[int]:
        """Amounts along the path, ``[amount_in, amount_out]``."""
        return [self.amount_in, self.amount_out]


@dataclass(frozen=True)
class LiquidityReceipt:
    """An accepted deposit, in the asset order the caller used."""
    amount_a: int
    amount_b: int
    shares: int


@dataclass(frozen=True)
class WithdrawalReceipt:
    """A withdrawal, in the asset order the caller used."""
    amount_a: int
    amount_b: int
    shares_burned: int


@dataclass(frozen=True)
class PoolResult(Generic[T]):
    """Success payload or the error that aborted the operation."""
    ok: bool
    value: Optional[T] = None
    error: Optional[PoolError] = None

    def __post_init__(self) -> None:
        if self.ok and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.ok and self.error is None:
            raise ValueError("failed result requires an error")

    @classmethod
    def success(cls, value: T) -> "PoolResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: PoolError) -> "PoolResult[T]":
        return cls(ok=False, error=error)

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Error kind of a failed result, None on success."""
        return None if self.error is None else self.error.kind

    def unwrap(self) -> T:
        """Return the value, raising the stored PoolError on failure."""
        if self.error is not None:
            raise self.error
        return self.value
