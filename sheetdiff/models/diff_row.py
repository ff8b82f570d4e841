from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ..services.rounding import delta, percent_change, round2, values_equal
from .structured_row import StructuredRow

"""DiffRow model and DiffStatus enum.

A DiffRow pairs zero or one old-snapshot row with zero or one new-snapshot
row sharing the same (product, label, occurrence) key.
"""

__all__ = [
    "DiffStatus",
    "DiffRow",
]


class DiffStatus(Enum):
    """Outcome of one pairing.

    - ADDED: only the new snapshot has the row
    - REMOVED: only the old snapshot has the row
    - CHANGED: both sides present, quantity/price/amount differ
    - UNCHANGED: both sides present and effectively equal
    """
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"

    @property
    def label(self) -> str:
        """Report text for the status column."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    DiffStatus.ADDED: "Добавлено",
    DiffStatus.REMOVED: "Удалено",
    DiffStatus.CHANGED: "Изменено",
    DiffStatus.UNCHANGED: "Без изменений",
}


@dataclass(frozen=True)
class DiffRow:
    product: str
    item: str  # display label
    old_quantity: Decimal | None
    new_quantity: Decimal | None
    quantity_delta: Decimal | None
    old_price: Decimal | None
    new_price: Decimal | None
    price_delta: Decimal | None
    old_amount: Decimal | None
    new_amount: Decimal | None
    amount_delta: Decimal | None
    amount_delta_percent: Decimal | None
    status: DiffStatus

    @classmethod
    def from_pair(
        cls,
        product: str,
        item: str,
        old: StructuredRow | None,
        new: StructuredRow | None,
    ) -> DiffRow:
        """Build a DiffRow from an aligned pair; values are rounded before comparing."""
        old_quantity = round2(old.quantity) if old else None
        new_quantity = round2(new.quantity) if new else None
        old_price = round2(old.price) if old else None
        new_price = round2(new.price) if new else None
        old_amount = round2(old.amount) if old else None
        new_amount = round2(new.amount) if new else None

        if old is None and new is not None:
            status = DiffStatus.ADDED
        elif old is not None and new is None:
            status = DiffStatus.REMOVED
        elif (
            values_equal(old_quantity, new_quantity)
            and values_equal(old_price, new_price)
            and values_equal(old_amount, new_amount)
        ):
            status = DiffStatus.UNCHANGED
        else:
            status = DiffStatus.CHANGED

        return cls(
            product=product,
            item=item,
            old_quantity=old_quantity,
            new_quantity=new_quantity,
            quantity_delta=delta(new_quantity, old_quantity),
            old_price=old_price,
            new_price=new_price,
            price_delta=delta(new_price, old_price),
            old_amount=old_amount,
            new_amount=new_amount,
            amount_delta=delta(new_amount, old_amount),
            amount_delta_percent=percent_change(new_amount, old_amount),
            status=status,
        )

    @property
    def has_difference(self) -> bool:
        return self.status is not DiffStatus.UNCHANGED

    @property
    def status_text(self) -> str:
        return self.status.label
