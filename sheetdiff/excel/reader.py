from __future__ import annotations

import numbers
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.cell import Cell, RawRow

"""Workbook reader: one worksheet -> raw rows of Cell.

The sheet is read without a header row; every DataFrame row becomes one raw
row in sheet order. Natively numeric cells carry their value as Decimal,
everything else is handed over as display text for the extractor to
classify.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook_rows",
    "to_cell",
]


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or the requested sheet does not exist."""


def _format_number(value: Decimal) -> str:
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def to_cell(value: Any) -> Cell:
    """Convert a value produced by pandas into a Cell."""
    if value is None:
        return Cell()
    # bool first: bool (and numpy.bool_) would otherwise pass the number check
    if pd.api.types.is_bool(value):
        return Cell.text_cell("TRUE" if value else "FALSE")
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return Cell()
    if isinstance(value, (datetime, date, time)):
        return Cell.text_cell(value.isoformat())
    if isinstance(value, numbers.Number):
        number = Decimal(str(value))
        if not number.is_finite():
            return Cell.text_cell(str(value))
        return Cell.number_cell(number, _format_number(number))
    return Cell.text_cell(str(value))


def read_workbook_rows(path: Path, sheet: str | None = None) -> list[RawRow]:
    """Read one worksheet of ``path`` (the first one when ``sheet`` is None).

    Trailing empty cells of each row are dropped.
    """
    if not path.exists():
        raise WorkbookReadError(f"file not found: {path}")
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise WorkbookReadError(f"cannot open workbook {path.name}: {e}") from e

    with xls:
        sheet_names = [str(n) for n in xls.sheet_names]
        if not sheet_names:
            raise WorkbookReadError(f"workbook {path.name} has no sheets")
        if sheet is None:
            target = xls.sheet_names[0]
        elif sheet in sheet_names:
            target = xls.sheet_names[sheet_names.index(sheet)]
        else:
            raise WorkbookReadError(f"sheet '{sheet}' not found in {path.name}: {sheet_names}")
        try:
            df = xls.parse(target, header=None, dtype=object)
        except Exception as e:
            raise WorkbookReadError(f"cannot read sheet '{target}' of {path.name}: {e}") from e

    rows: list[RawRow] = []
    for raw in df.itertuples(index=False, name=None):
        cells = [to_cell(v) for v in raw]
        while cells and cells[-1].is_blank:
            cells.pop()
        rows.append(cells)
    return rows
