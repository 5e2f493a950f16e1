"""
Money helpers.

Amounts are stored as two-place decimals and all balance arithmetic runs on
integer cents, so a sequence of allocations can never drift away from the
stored values. Rounding is half-up everywhere.
"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def round_money(value) -> Decimal:
    """Quantize ``value`` to two decimal places (half-up)."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value) -> int:
    """
    Convert a money amount to integer cents.

    >>> to_cents(Decimal('12.34'))
    1234
    >>> to_cents('0.005')
    1
    """
    return int(round_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place decimal."""
    return (Decimal(cents) / 100).quantize(CENT)
