"""The fixed asset pair of a pool."""

from dataclasses import dataclass

from simpleswap.core.errors import ErrorKind, PoolError
from simpleswap.core.interfaces import AssetId


@dataclass(frozen=True)
class AssetPair:
    """Ordered pair of distinct assets. ``asset_a`` is side A of the pool."""
    asset_a: AssetId
    asset_b: AssetId

    def __post_init__(self) -> None:
        if not self.asset_a or not self.asset_b:
            raise ValueError("asset identifiers must be non-empty")
        if self.asset_a == self.asset_b:
            raise ValueError(f"pair assets must differ, got {self.asset_a!r} twice")

    def __contains__(self, asset: object) -> bool:
        return asset == self.asset_a or asset == self.asset_b

    def is_side_a(self, asset: AssetId) -> bool:
        """True if ``asset`` is side A, False if side B.

        Raises:
            PoolError: UNKNOWN_ASSET if ``asset`` is not in the pair
        """
        if asset == self.asset_a:
            return True
        if asset == self.asset_b:
            return False
        raise PoolError(ErrorKind.UNKNOWN_ASSET, f"{asset!r} is not traded by this pool")

    def other(self, asset: AssetId) -> AssetId:
        """The pair asset that is not ``asset``."""
        return self.asset_b if self.is_side_a(asset) else self.asset_a

    def orient(self, first: AssetId, second: AssetId) -> bool:
        """Check that (first, second) names this pair in some order.

        Returns:
            False when given as (A, B), True when given as (B, A)

        Raises:
            PoolError: UNKNOWN_ASSET if the two assets are not this pair
        """
        if (first, second) == (self.asset_a, self.asset_b):
            return False
        if (first, second) == (self.asset_b, self.asset_a):
            return True
        raise PoolError(
            ErrorKind.UNKNOWN_ASSET,
            f"({first!r}, {second!r}) is not the pool pair ({self.asset_a!r}, {self.asset_b!r})",
        )
