"""Journaled external transfers with compensation on rollback."""

import logging
from dataclasses import dataclass
from typing import Literal

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.interfaces import AccountId, AssetId, AssetTransferAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferRecord:
    """A transfer that the adapter confirmed."""
    direction: Literal["debit", "credit"]
    asset: AssetId
    party: AccountId
    amount: int


class TransferJournal:
    """Records the transfers of one pool operation so they can be undone.

    External ledgers cannot be restored from a snapshot, so rolling back
    an operation replays each confirmed transfer in reverse: a debit is
    refunded with a credit, a credit is clawed back with a debit.
    """

    def __init__(self, adapter: AssetTransferAdapter):
        self._adapter = adapter
        self.records: list[TransferRecord] = []

    def debit(self, asset: AssetId, party: AccountId, amount: int) -> None:
        """Debit ``party`` or raise TRANSFER_FAILED with the adapter's error."""
        receipt = self._adapter.debit(asset, party, amount)
        if not receipt.success:
            raise PoolError(ErrorKind.TRANSFER_FAILED, receipt.error)
        self.records.append(TransferRecord("debit", asset, party, amount))

    def credit(self, asset: AssetId, party: AccountId, amount: int) -> None:
        """Credit ``party`` or raise TRANSFER_FAILED with the adapter's error."""
        receipt = self._adapter.credit(asset, party, amount)
        if not receipt.success:
            raise PoolError(ErrorKind.TRANSFER_FAILED, receipt.error)
        self.records.append(TransferRecord("credit", asset, party, amount))

    def unwind(self) -> None:
        """Reverse every recorded transfer, newest first.

        Every record is attempted even after a refusal. Refused ones stay in
        ``records``.

        Raises:
            PoolError: TRANSFER_FAILED listing every refused compensation
        """
        failures = []
        pending = []
        for record in reversed(self.records):
            if record.direction == "debit":
                receipt = self._adapter.credit(record.asset, record.party, record.amount)
            else:
                receipt = self._adapter.debit(record.asset, record.party, record.amount)
            if not receipt.success:
                logger.error(
                    "Compensation for %s of %s %s (%s) failed: %s",
                    record.direction, record.amount, record.asset, record.party, receipt.error,
                )
                failures.append(f"rollback of {record.direction} to {record.party} failed: {receipt.error}")
                pending.append(record)

        self.records = pending[::-1]
        if failures:
            raise PoolError(ErrorKind.TRANSFER_FAILED, "; ".join(failures))
