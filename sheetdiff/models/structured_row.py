from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""StructuredRow model: one numeric record extracted from a raw worksheet row."""

__all__ = [
    "StructuredRow",
]


@dataclass(frozen=True)
class StructuredRow:
    """A data row of one snapshot after extraction.

    ``source_order`` is the 1-based position of the raw row and only drives
    ordering; rows are identified by (product, base_label, occurrence).
    Quantity, price and amount are the first three numeric cells of the row,
    each independently absent.
    """
    product: str
    base_label: str  # never empty; falls back to a synthetic "Row N" label
    display_label: str  # base_label, suffixed " (n)" for repeated labels
    source_order: int
    quantity: Decimal | None = None
    price: Decimal | None = None
    amount: Decimal | None = None

    @property
    def product_key(self) -> str:
        return self.product.casefold()

    @property
    def label_key(self) -> str:
        return self.base_label.casefold()
