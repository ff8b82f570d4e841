from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..services.rounding import is_effectively_zero, percent_change, round2

"""ProductSummary model: per-product amount totals of both snapshots."""

__all__ = [
    "ProductSummary",
    "DEFAULT_THRESHOLD_PERCENT",
]

DEFAULT_THRESHOLD_PERCENT = Decimal(5)


@dataclass(frozen=True)
class ProductSummary:
    """Amount totals of one product in the old and new snapshot.

    Invariant: ``amount_delta == round2(new_amount - old_amount)``, computed on
    the already rounded totals.
    """
    product: str
    old_amount: Decimal
    new_amount: Decimal
    amount_delta: Decimal
    amount_delta_percent: Decimal | None

    @classmethod
    def create(cls, product: str, old_amount: Decimal, new_amount: Decimal) -> ProductSummary:
        old_rounded = round2(old_amount)
        new_rounded = round2(new_amount)
        return cls(
            product=product,
            old_amount=old_rounded,
            new_amount=new_rounded,
            amount_delta=round2(new_rounded - old_rounded),
            amount_delta_percent=percent_change(new_rounded, old_rounded),
        )

    def should_display(self, threshold_percent: Decimal = DEFAULT_THRESHOLD_PERCENT) -> bool:
        """Materiality check: is the change large enough to report this product?"""
        if self.amount_delta_percent is not None:
            return abs(self.amount_delta_percent) >= threshold_percent
        return not is_effectively_zero(self.amount_delta)
