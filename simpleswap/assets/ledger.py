"""In-memory asset ledger implementing the pool's transfer adapter."""

from collections import defaultdict
from typing import Iterable, Optional

from simpleswap.core.fixed_point import require_amount
from simpleswap.core.interfaces import (
    AccountId,
    AssetId,
    AssetTransferAdapter,
    TransferReceipt,
)

POOL_CUSTODY = "pool"


class InMemoryAssetLedger(AssetTransferAdapter):
    """Balances of any number of fungible assets, keyed by holder.

    The pool's holdings live in a custody account (``custody``): a debit
    moves assets from a party into custody, a credit moves them out.
    ``mint`` plays the role of a test faucet.
    """

    def __init__(
        self,
        custody: AccountId = POOL_CUSTODY,
        balances: Optional[Iterable[tuple[AssetId, AccountId, int]]] = None,
    ):
        self.custody = custody
        self._balances: dict[AssetId, dict[AccountId, int]] = defaultdict(dict)
        for asset, holder, amount in balances or ():
            self._set(asset, holder, require_amount("balance", amount))

    def balance_of(self, asset: AssetId, holder: AccountId) -> int:
        return self._balances.get(asset, {}).get(holder, 0)

    def total_supply(self, asset: AssetId) -> int:
        return sum(self._balances.get(asset, {}).values())

    def balances(self) -> list[tuple[AssetId, AccountId, int]]:
        """All non-zero balances as ``(asset, holder, amount)`` rows."""
        return [
            (asset, holder, amount)
            for asset, holders in sorted(self._balances.items())
            for holder, amount in sorted(holders.items())
            if amount
        ]

    def mint(self, asset: AssetId, holder: AccountId, amount: int) -> None:
        require_amount("amount", amount)
        self._set(asset, holder, self.balance_of(asset, holder) + amount)

    def transfer(self, asset: AssetId, sender: AccountId, recipient: AccountId, amount: int) -> TransferReceipt:
        """Move ``amount`` between two holders of ``asset``."""
        require_amount("amount", amount)
        available = self.balance_of(asset, sender)
        if available < amount:
            return TransferReceipt.failed(
                f"{sender} has {available} {asset}, cannot transfer {amount}"
            )
        self._set(asset, sender, available - amount)
        self._set(asset, recipient, self.balance_of(asset, recipient) + amount)
        return TransferReceipt.ok()

    def debit(self, asset: AssetId, party: AccountId, amount: int) -> TransferReceipt:
        return self.transfer(asset, party, self.custody, amount)

    def credit(self, asset: AssetId, party: AccountId, amount: int) -> TransferReceipt:
        return self.transfer(asset, self.custody, party, amount)

    def _set(self, asset: AssetId, holder: AccountId, amount: int) -> None:
        if amount:
            self._balances[asset][holder] = amount
        else:
            self._balances[asset].pop(holder, None)
