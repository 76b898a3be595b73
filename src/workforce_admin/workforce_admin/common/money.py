from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def to_hours(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def dsum(values: Iterable) -> Decimal:
    total = Decimal(0)
    for v in values:
        total += Decimal(str(v or 0))
    return total


def fmt_money(value) -> str:
    return f"${to_money(value):,.2f}"
