from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ..models.diff_row import DiffRow
from ..models.structured_row import StructuredRow
from .exclusion import ExclusionRules

"""Diff alignment of two extracted snapshots.

Rows are grouped by product, then by base label (both case-insensitive).
Inside a (product, label) group the n-th old row is paired with the n-th new
row by source order; surplus rows on either side become Added/Removed.

Pairing is positional, not content based: if rows sharing a label swap
places between snapshots they are still paired by position and reported as
Changed. Groups are ordered by the earliest source row seen on either side.
"""

__all__ = [
    "align",
]

logger = logging.getLogger(__name__)


@dataclass
class _Group:
    name: str  # first spelling seen
    rows: list[StructuredRow] = field(default_factory=list)

    @property
    def first_order(self) -> float:
        return min((r.source_order for r in self.rows), default=math.inf)


def _group_by(rows: Iterable[StructuredRow], key: Callable[[StructuredRow], str]) -> dict[str, _Group]:
    groups: dict[str, _Group] = {}
    for row in rows:
        name = key(row)
        group = groups.get(name.casefold())
        if group is None:
            group = groups[name.casefold()] = _Group(name)
        group.rows.append(row)
    for group in groups.values():
        group.rows.sort(key=lambda r: r.source_order)
    return groups


def _ordered_keys(old: dict[str, _Group], new: dict[str, _Group]) -> list[str]:
    keys = list(dict.fromkeys([*old, *new]))

    def order(key: str) -> tuple[float, str]:
        first = min(
            old[key].first_order if key in old else math.inf,
            new[key].first_order if key in new else math.inf,
        )
        # ties compare upper-cased names ordinally
        return first, (old.get(key) or new[key]).name.upper()

    return sorted(keys, key=order)


def align(
    old_rows: Iterable[StructuredRow],
    new_rows: Iterable[StructuredRow],
    rules: ExclusionRules | None = None,
) -> list[DiffRow]:
    """Pair old and new rows and classify each pair.

    Excluded (subtotal/total) labels produce no DiffRow.
    """
    rules = rules or ExclusionRules.from_config()
    old_products = _group_by(old_rows, lambda r: r.product)
    new_products = _group_by(new_rows, lambda r: r.product)

    result: list[DiffRow] = []
    excluded = 0
    for product_key in _ordered_keys(old_products, new_products):
        old_group = old_products.get(product_key)
        new_group = new_products.get(product_key)
        product = (old_group or new_group).name

        old_labels = _group_by(old_group.rows if old_group else [], lambda r: r.base_label)
        new_labels = _group_by(new_group.rows if new_group else [], lambda r: r.base_label)

        for label_key in _ordered_keys(old_labels, new_labels):
            old_list = old_labels[label_key].rows if label_key in old_labels else []
            new_list = new_labels[label_key].rows if label_key in new_labels else []
            label = (old_labels.get(label_key) or new_labels[label_key]).name

            for i in range(max(len(old_list), len(new_list))):
                old = old_list[i] if i < len(old_list) else None
                new = new_list[i] if i < len(new_list) else None

                checked = old.base_label if old else new.base_label if new else label
                if rules.is_excluded(checked):
                    excluded += 1
                    continue

                if old is not None:
                    item = old.display_label
                elif new is not None:
                    item = new.display_label
                else:
                    item = label if i == 0 else f"{label} ({i + 1})"
                result.append(DiffRow.from_pair(product, item, old, new))

    logger.debug(f"aligned {len(result)} rows, {excluded} excluded as subtotals")
    return result
