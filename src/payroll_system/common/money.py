from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, str]


def to_decimal(value: Number | float | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # floats go through str() so 0.1 stays 0.1
    return Decimal(str(value))


def round_money(amount: Decimal) -> Decimal:
    """Round half-up to cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def minutes_to_hours(minutes: int) -> Decimal:
    return round_money(Decimal(int(minutes)) / Decimal(60))


def total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)
