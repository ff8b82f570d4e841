from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

"""Currency-grade rounding and percent-change helpers.

All amounts are ``decimal.Decimal``; ``None`` means the value is absent on
that side of the comparison. ``Decimal.quantize`` defaults to half-even, so
the rounding mode is always passed explicitly.
"""

__all__ = [
    "round2",
    "is_effectively_zero",
    "percent_change",
    "delta",
    "values_equal",
]

PRECISION = Decimal("0.01")
ZERO_TOLERANCE = Decimal("0.0001")
HUNDRED = Decimal(100)


def round2(value: Decimal | None) -> Decimal | None:
    """Round to 2 fractional digits, ties away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    if value is None:
        return None
    with localcontext() as ctx:
        # quantize fails when the result has more digits than the context precision
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(PRECISION, rounding=ROUND_HALF_UP)


def is_effectively_zero(value: Decimal) -> bool:
    return abs(value) < ZERO_TOLERANCE


def percent_change(new_value: Decimal | None, old_value: Decimal | None) -> Decimal | None:
    """Percentage change from ``old_value`` to ``new_value``.

    Not a pure ratio: growth from zero (or from nothing) is reported as 100,
    disappearance as -100, and nothing-to-nothing as ``None``.

    Examples:
        >>> percent_change(Decimal("25"), Decimal("20"))
        Decimal('25.00')
        >>> percent_change(Decimal("5"), Decimal("0"))
        Decimal('100')
        >>> percent_change(None, Decimal("5"))
        Decimal('-100')
    """
    if new_value is not None and old_value is not None:
        if is_effectively_zero(old_value):
            return Decimal(0) if is_effectively_zero(new_value) else HUNDRED
        return round2((new_value - old_value) / old_value * HUNDRED)

    if new_value is not None:
        # old side absent; never a negative sentinel here
        return Decimal(0) if is_effectively_zero(new_value) else HUNDRED

    if old_value is not None:
        return Decimal(0) if is_effectively_zero(old_value) else -HUNDRED

    return None


def delta(new_value: Decimal | None, old_value: Decimal | None) -> Decimal | None:
    if new_value is None or old_value is None:
        return None
    return round2(new_value - old_value)


def values_equal(left: Decimal | None, right: Decimal | None) -> bool:
    """Absent equals absent; present values are equal within the zero tolerance."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return is_effectively_zero(left - right)
