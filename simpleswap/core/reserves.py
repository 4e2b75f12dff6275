"""Reserve balances of a pool."""

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.fixed_point import MAX_AMOUNT, require_amount
from simpleswap.core.interfaces import AssetId
from simpleswap.core.pair import AssetPair


class ReservePool:
    """Holds the two reserves and is the only writer of them.

    Reserves change only through ``apply_delta``, which replaces the
    (A, B) pair in a single assignment so a reader never observes a
    half-applied update.
    """

    def __init__(self, pair: AssetPair, reserve_a: int = 0, reserve_b: int = 0):
        self.pair = pair
        self._reserves = (require_amount("reserve_a", reserve_a), require_amount("reserve_b", reserve_b))

    @property
    def reserve_a(self) -> int:
        return self._reserves[0]

    @property
    def reserve_b(self) -> int:
        return self._reserves[1]

    @property
    def product(self) -> int:
        """The constant-product value ``reserve_a * reserve_b``."""
        reserve_a, reserve_b = self._reserves
        return reserve_a * reserve_b

    def reserve_of(self, asset: AssetId) -> int:
        """Reserve held for ``asset`` (UNKNOWN_ASSET if not in the pair)."""
        reserve_a, reserve_b = self._reserves
        return reserve_a if self.pair.is_side_a(asset) else reserve_b

    def oriented(self, asset_in: AssetId) -> tuple[int, int]:
        """Return ``(reserve_in, reserve_out)`` for a trade paying ``asset_in``."""
        reserve_a, reserve_b = self._reserves
        if self.pair.is_side_a(asset_in):
            return reserve_a, reserve_b
        return reserve_b, reserve_a

    def apply_delta(self, delta_a: int, delta_b: int) -> None:
        """Add signed deltas to both reserves atomically.

        Raises:
            PoolError: UNDERFLOW if a reserve would go negative, OVERFLOW if
                it would exceed MAX_AMOUNT. Neither reserve changes then.
        """
        reserve_a, reserve_b = self._reserves
        new_a = reserve_a + delta_a
        new_b = reserve_b + delta_b
        for name, value in (("reserve_a", new_a), ("reserve_b", new_b)):
            if value < 0:
                raise PoolError(ErrorKind.UNDERFLOW, f"{name} would become {value}")
            if value > MAX_AMOUNT:
                raise PoolError(ErrorKind.OVERFLOW, f"{name} would exceed {MAX_AMOUNT}")
        self._reserves = (new_a, new_b)

    def apply_trade(self, asset_in: AssetId, amount_in: int, amount_out: int) -> None:
        """Credit ``amount_in`` to the input side and debit ``amount_out`` from the other."""
        if self.pair.is_side_a(asset_in):
            self.apply_delta(amount_in, -amount_out)
        else:
            self.apply_delta(-amount_out, amount_in)

    def snapshot(self) -> tuple[int, int]:
        """Both reserves as one consistent pair."""
        return self._reserves

    def restore(self, snapshot: tuple[int, int]) -> None:
        reserve_a, reserve_b = snapshot
        self._reserves = (reserve_a, reserve_b)

    def __repr__(self) -> str:
        return (
            f"ReservePool({self.pair.asset_a}={self._reserves[0]}, "
            f"{self.pair.asset_b}={self._reserves[1]})"
        )
