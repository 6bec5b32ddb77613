"""Exact-decimal money helpers.

Amounts are ``Decimal`` with two fractional digits. Division always goes
through ``round_money`` (half-up), so no amount is ever truncated.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return round_money(sum(values, ZERO))


def is_settled(value: Decimal) -> bool:
    """Anything under one cent counts as settled."""
    return abs(value) < CENT


def is_whole_cents(value: Decimal) -> bool:
    """True when ``value`` has no digits past the cent."""
    return value == round_money(value)
