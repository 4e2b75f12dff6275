"""Asset transfer interface the pool uses to move external assets."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

AssetId = str
AccountId = str


@dataclass(frozen=True)
class TransferReceipt:
    """Outcome of a single debit or credit on an external asset ledger."""
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "TransferReceipt":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "TransferReceipt":
        return cls(success=False, error=error)


class AssetTransferAdapter(ABC):
    """Abstract gateway to the two asset ledgers behind a pool.

    Implementations move assets between parties and the pool's custody.
    Each call is atomic and may fail independently; a failure is reported
    through the returned receipt, not by raising.

    Calls may run untrusted code (including calls back into the pool), so
    the pool holds its reentrancy lock around them.
    """

    @abstractmethod
    def debit(self, asset: AssetId, party: AccountId, amount: int) -> TransferReceipt:
        """Move ``amount`` of ``asset`` from ``party`` into pool custody.

        Args:
            asset: Asset identifier
            party: Account paying the pool
            amount: WAD-scaled amount

        Returns:
            TransferReceipt describing success or the ledger's error
        """

    @abstractmethod
    def credit(self, asset: AssetId, party: AccountId, amount: int) -> TransferReceipt:
        """Move ``amount`` of ``asset`` from pool custody to ``party``.

        Args:
            asset: Asset identifier
            party: Account receiving from the pool
            amount: WAD-scaled amount

        Returns:
            TransferReceipt describing success or the ledger's error
        """
