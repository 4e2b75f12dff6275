"""Pool error kinds and the exception carrying them."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Reason a pool operation was rejected."""
    EXPIRED = "expired"
    UNKNOWN_ASSET = "unknown_asset"
    INVALID_PATH = "invalid_path"
    ZERO_INPUT = "zero_input"
    ZERO_RESERVE = "zero_reserve"
    EMPTY_POOL = "empty_pool"
    INSUFFICIENT_OUTPUT_AMOUNT = "insufficient_output_amount"
    BELOW_MINIMUM_A = "below_minimum_a"
    BELOW_MINIMUM_B = "below_minimum_b"
    INSUFFICIENT_INITIAL_LIQUIDITY = "insufficient_initial_liquidity"
    INSUFFICIENT_SHARES = "insufficient_shares"
    TRANSFER_FAILED = "transfer_failed"
    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    REENTRANT = "reentrant"


class PoolError(Exception):
    """A rejected pool operation.

    Raised by the pool components; the public ``Pool`` surface turns it
    into a failed ``PoolResult``.
    """

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)
