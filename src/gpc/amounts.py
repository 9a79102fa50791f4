"""Exact arithmetic for money and hour columns.

Totals are accumulated as Decimal and converted to float once, when the
response schema is built.
"""

from __future__ import annotations

from decimal import Decimal

ZERO = Decimal(0)


def to_decimal(value) -> Decimal:
    """Column value as Decimal; NULL counts as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_float(value) -> float:
    return float(to_decimal(value))
