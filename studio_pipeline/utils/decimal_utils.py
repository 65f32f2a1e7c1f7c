"""Decimal helpers for money and ratio arithmetic."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Coerce ints, floats, strings and None into an unrounded Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def ratio(value) -> Decimal:
    return to_decimal(value).quantize(FOURPLACES, rounding=ROUND_HALF_UP)
