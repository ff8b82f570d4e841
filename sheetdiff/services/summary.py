from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from ..models.comparison_result import ComparisonResult
from ..models.product_summary import ProductSummary
from ..models.structured_row import StructuredRow
from .exclusion import ExclusionRules

"""Product summary aggregation and summary text rendering.

Product totals are computed from the full extracted snapshots, not from the
aligned rows, so a product's visibility never depends on which of its rows
made it into the diff.
"""

__all__ = [
    "calculate_product_summaries",
    "sum_amounts",
    "format_amount",
    "render_summary_text",
    "render_status_line",
]

ZERO = Decimal(0)


def sum_amounts(
    rows: Sequence[StructuredRow],
    product: str,
    rules: ExclusionRules | None = None,
) -> Decimal:
    """Sum of ``amount`` (absent counts as 0) over one product's rows.

    Rows whose label ``rules`` excludes are not counted; pass ``rules=None``
    to count every row.
    """
    key = product.casefold()
    return sum(
        (
            r.amount or ZERO
            for r in rows
            if r.product_key == key and (rules is None or not rules.is_excluded(r.base_label))
        ),
        ZERO,
    )


def calculate_product_summaries(
    old_rows: Sequence[StructuredRow],
    new_rows: Sequence[StructuredRow],
    rules: ExclusionRules | None = None,
    apply_exclusion: bool = True,
) -> dict[str, ProductSummary]:
    """One ProductSummary per product present in either snapshot.

    Keys keep the first spelling seen (old snapshot first); products that
    differ only by case share one summary.
    """
    rules = rules or ExclusionRules.from_config()
    sum_rules = rules if apply_exclusion else None

    products: dict[str, str] = {}
    for row in [*old_rows, *new_rows]:
        products.setdefault(row.product_key, row.product)

    return {
        name: ProductSummary.create(
            name,
            sum_amounts(old_rows, name, sum_rules),
            sum_amounts(new_rows, name, sum_rules),
        )
        for name in products.values()
    }


def format_amount(value: Decimal, decimal_mark: str = ",", group_mark: str | None = None) -> str:
    """2-decimal text with grouped thousands.

    The group mark defaults to a no-break space when the decimal mark is a
    comma, and to a comma otherwise.

    Examples:
        >>> format_amount(Decimal("1234.5"))
        '1\\xa0234,50'
        >>> format_amount(Decimal("-20"), decimal_mark=".")
        '-20.00'
    """
    if group_mark is None:
        group_mark = "\u00a0" if decimal_mark == "," else ","
    text = f"{value:,.2f}"
    return text.replace(",", "\0").replace(".", decimal_mark).replace("\0", group_mark)


def render_summary_text(summary: ProductSummary, decimal_mark: str = ",") -> str:
    """Render the product summary line shown next to a product group.

    Format: ``Σ: {old} → {new} (Δ {delta}, {percent}%)``; the percent part
    becomes ``—`` when it is undefined.

    Examples:
        >>> s = ProductSummary.create("A", Decimal("20"), Decimal("25"))
        >>> render_summary_text(s, decimal_mark=".")
        'Σ: 20.00 → 25.00 (Δ 5.00, 25.00%)'
    """
    old_text = format_amount(summary.old_amount, decimal_mark)
    new_text = format_amount(summary.new_amount, decimal_mark)
    delta_text = format_amount(summary.amount_delta, decimal_mark)
    if summary.amount_delta_percent is not None:
        percent_text = format_amount(summary.amount_delta_percent, decimal_mark) + "%"
    else:
        percent_text = "—"
    return f"Σ: {old_text} → {new_text} (Δ {delta_text}, {percent_text})"


def render_status_line(result: ComparisonResult) -> str:
    """One-line outcome of a comparison, for the SUMMARY log line."""
    if not result.has_results:
        return "No differences found."
    changed = result.changed_count
    if changed == 0:
        return "Data is identical."
    return f"Found {changed} rows with differences."
