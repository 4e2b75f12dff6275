"""Ownership share accounting."""

from typing import Iterator

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import MAX_AMOUNT, require_amount
from simpleswap.core.interfaces import AccountId


class ShareLedger:
    """Total share supply and per-holder balances.

    A fungible single-asset ledger: holders with a zero balance are
    dropped, so ``sum(balances) == total_supply()`` at all times.
    """

    def __init__(self, balances: dict[AccountId, int] | None = None):
        self._balances: dict[AccountId, int] = {}
        self._total = 0
        for holder, amount in (balances or {}).items():
            if require_amount(f"balance of {holder}", amount) > 0:
                self._balances[holder] = amount
                self._total += amount
        if self._total > MAX_AMOUNT:
            raise ValueError(f"total share supply exceeds {MAX_AMOUNT}")

    def total_supply(self) -> int:
        return self._total

    def balance_of(self, holder: AccountId) -> int:
        return self._balances.get(holder, 0)

    def holders(self) -> Iterator[tuple[AccountId, int]]:
        """Iterate over ``(holder, balance)`` for every non-zero holder."""
        return iter(list(self._balances.items()))

    def mint(self, holder: AccountId, amount: int) -> None:
        """Create ``amount`` new shares owned by ``holder``.

        Raises:
            PoolError: OVERFLOW if total supply would exceed MAX_AMOUNT
        """
        require_amount("amount", amount)
        if self._total + amount > MAX_AMOUNT:
            raise PoolError(ErrorKind.OVERFLOW, f"share supply would exceed {MAX_AMOUNT}")
        if amount == 0:
            return
        self._total += amount
        self._balances[holder] = self._balances.get(holder, 0) + amount

    def burn(self, holder: AccountId, amount: int) -> None:
        """Destroy ``amount`` of ``holder``'s shares.

        Raises:
            PoolError: INSUFFICIENT_SHARES if the holder owns fewer
        """
        require_amount("amount", amount)
        self._debit(holder, amount)
        self._total -= amount

    def transfer(self, sender: AccountId, recipient: AccountId, amount: int) -> None:
        """Move ``amount`` shares from ``sender`` to ``recipient``."""
        require_amount("amount", amount)
        self._debit(sender, amount)
        if amount:
            self._balances[recipient] = self._balances.get(recipient, 0) + amount

    def _debit(self, holder: AccountId, amount: int) -> None:
        balance = self._balances.get(holder, 0)
        if balance < amount:
            raise PoolError(
                ErrorKind.INSUFFICIENT_SHARES,
                f"{holder} holds {balance} shares, needs {amount}",
            )
        remaining = balance - amount
        if remaining:
            self._balances[holder] = remaining
        else:
            self._balances.pop(holder, None)

    def snapshot(self) -> tuple[int, dict[AccountId, int]]:
        return self._total, dict(self._balances)

    def restore(self, snapshot: tuple[int, dict[AccountId, int]]) -> None:
        self._total, balances = snapshot
        self._balances = dict(balances)
