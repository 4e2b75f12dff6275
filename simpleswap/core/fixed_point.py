"""Fixed-point helpers for 18-decimal (WAD) integer amounts.

All pool arithmetic is done on plain ints scaled by 10**18. Decimal is
only used at the human boundary (parsing and formatting token amounts).
"""

import math
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

DECIMALS = 18
WAD = 10**DECIMALS
_WAD_DECIMAL = Decimal(WAD)

# Ceiling of a UFixed128x18 quantity
MAX_AMOUNT = 2**128 - 1

isqrt = math.isqrt


def require_amount(name: str, value: int) -> int:
    """Validate that ``value`` is a non-negative int amount."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute floor(a * b / denominator) without intermediate rounding."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator


def to_wad(value: Union[Decimal, str, int]) -> int:
    """Convert a token amount in whole units to its WAD integer.

    Args:
        value: Amount such as ``"18.5"``, ``Decimal("100")`` or ``100``

    Returns:
        The amount scaled by 10**18

    Raises:
        ValueError: If the amount is negative, not a number, or has more
            than 18 fractional digits
    """
    if isinstance(value, bool):
        raise ValueError(f"not a token amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"not a token amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"not a token amount: {value!r}")
    if amount < 0:
        raise ValueError(f"token amount must be >= 0, got {value}")

    with localcontext() as ctx:
        ctx.prec = 80
        scaled = amount * _WAD_DECIMAL
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{value} has more than {DECIMALS} fractional digits")
        return int(scaled)


def from_wad(value: int) -> Decimal:
    """Convert a WAD integer to an exact Decimal in whole units."""
    with localcontext() as ctx:
        ctx.prec = 80
        return Decimal(value) / _WAD_DECIMAL


def format_wad(value: int) -> str:
    """Render a WAD integer with all 18 fractional digits, trailing zeros trimmed."""
    whole, frac = divmod(value, WAD)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:0{DECIMALS}d}".rstrip("0")
