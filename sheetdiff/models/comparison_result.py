from __future__ import annotations

from dataclasses import dataclass, field

from .diff_row import DiffRow
from .product_summary import ProductSummary

"""ComparisonResult: what report assembly hands to the report sink.

Rows are already filtered to visible products and ordered by product group;
``summaries`` only holds visible products.
"""

__all__ = [
    "ComparisonResult",
    "ProductGroup",
]


@dataclass(frozen=True)
class ProductGroup:
    product: str
    summary: ProductSummary | None
    rows: list[DiffRow]


@dataclass(frozen=True)
class ComparisonResult:
    rows: list[DiffRow] = field(default_factory=list)
    summaries: dict[str, ProductSummary] = field(default_factory=dict)

    @property
    def has_results(self) -> bool:
        return bool(self.rows)

    @property
    def changed_count(self) -> int:
        return sum(1 for r in self.rows if r.has_difference)

    def summary_for(self, product: str) -> ProductSummary | None:
        """Case-insensitive summary lookup."""
        found = self.summaries.get(product)
        if found is not None:
            return found
        key = product.casefold()
        for name, summary in self.summaries.items():
            if name.casefold() == key:
                return summary
        return None

    def grouped(self) -> list[ProductGroup]:
        """Consecutive rows of the same product, in report order."""
        groups: list[ProductGroup] = []
        for row in self.rows:
            if not groups or groups[-1].product.casefold() != row.product.casefold():
                groups.append(ProductGroup(row.product, self.summary_for(row.product), []))
            groups[-1].rows.append(row)
        return groups
