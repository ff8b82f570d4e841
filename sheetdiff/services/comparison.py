from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..excel.reader import WorkbookReadError, read_workbook_rows
from ..models.comparison_result import ComparisonResult
from ..models.config_models import CompareConfig
from ..models.structured_row import StructuredRow
from .aligner import align
from .exclusion import ExclusionRules
from .extractor import RowExtractor
from .summary import calculate_product_summaries

"""Comparison orchestration: report assembly over two snapshots.

``compare_rows`` is the pure core: product summaries from the full snapshots,
visibility by materiality threshold, alignment, and filtering of the aligned
rows to visible products. ``compare_files`` adds the workbook reading around
it and is the only place where I/O failures can surface.
"""

__all__ = [
    "ComparisonError",
    "compare_rows",
    "compare_files",
]

logger = logging.getLogger(__name__)


class ComparisonError(Exception):
    """Raised when a comparison cannot run (e.g. a source workbook is unreadable)."""


def compare_rows(
    old_rows: Sequence[StructuredRow],
    new_rows: Sequence[StructuredRow],
    config: CompareConfig | None = None,
) -> ComparisonResult:
    """Compare two extracted snapshots.

    Steps:
    1. Product summaries over both full row sets
    2. Visible products: summaries passing ``should_display(threshold)``
    3. Alignment over both full row sets
    4. Keep rows of visible products; keep summaries of visible products
    """
    config = config or CompareConfig()
    rules = ExclusionRules.from_config(config.exclusion)

    summaries = calculate_product_summaries(
        old_rows, new_rows, rules, apply_exclusion=config.exclusion.apply_to_summaries
    )
    visible = {
        name: summary
        for name, summary in summaries.items()
        if summary.should_display(config.threshold_percent)
    }
    visible_keys = {name.casefold() for name in visible}

    rows = [r for r in align(old_rows, new_rows, rules) if r.product.casefold() in visible_keys]
    logger.debug(
        f"products={len(summaries)} visible={len(visible)} rows={len(rows)} "
        f"threshold={config.threshold_percent}"
    )
    return ComparisonResult(rows=rows, summaries=visible)


def _load_snapshot(path: Path, extractor: RowExtractor, sheet: str | None) -> list[StructuredRow]:
    try:
        raw_rows = read_workbook_rows(path, sheet)
    except WorkbookReadError as e:
        raise ComparisonError(f"{path.name}: {e}") from e
    rows = extractor.extract(raw_rows)
    logger.info(f"{path.name}: {len(raw_rows)} raw rows, {len(rows)} data rows")
    return rows


def compare_files(old_path: Path, new_path: Path, config: CompareConfig | None = None) -> ComparisonResult:
    """Read, extract and compare two workbooks.

    Raises:
        ComparisonError: If either workbook cannot be read.
    """
    config = config or CompareConfig()
    extractor = RowExtractor(config)
    old_rows = _load_snapshot(old_path, extractor, config.sheet)
    new_rows = _load_snapshot(new_path, extractor, config.sheet)
    return compare_rows(old_rows, new_rows, config)
