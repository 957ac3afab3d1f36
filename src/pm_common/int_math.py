"""Integer arithmetic utilities for on-chain token amounts.

All quantities and values are unbounded int (token base units). No float.
Division truncates toward zero, like the 256-bit BigInt arithmetic of the chain
indexer. Python's // floors instead, which differs for negative operands.
"""

from collections.abc import Iterable
from decimal import Decimal


def div_trunc(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero: div_trunc(-7, 2) == -3."""
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def max_amount(amounts: Iterable[int]) -> int:
    """Largest amount of a non-empty sequence."""
    values = list(amounts)
    if not values:
        raise ValueError("amounts must not be empty")
    return max(values)


def parse_amount(raw: object) -> int:
    """Convert a DB NUMERIC / decimal string / int into an exact int.

    NUMERIC(78,0) columns come back from asyncpg as Decimal; anything with a
    fractional part is rejected instead of silently truncated.
    """
    if isinstance(raw, bool):
        raise ValueError(f"Not an integer amount: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, Decimal):
        if raw != raw.to_integral_value():
            raise ValueError(f"Not an integer amount: {raw!r}")
        return int(raw)
    return int(str(raw))
