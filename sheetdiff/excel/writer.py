from __future__ import annotations

from pathlib import Path

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..models.comparison_result import ComparisonResult
from ..models.diff_row import DiffRow

"""Report writer: ComparisonResult -> xlsx.

Layout of the single "Различия" sheet:
- row 1: bold column headers
- per product: a bold grey summary row (product name merged over columns
  A-G, old/new/delta/percent totals in H-K), then the product's diff rows
- one empty row between product groups
"""

__all__ = [
    "WorkbookWriteError",
    "write_report",
    "REPORT_SHEET",
    "HEADERS",
]

REPORT_SHEET = "Различия"

HEADERS = [
    "Позиция",
    "Кол-во (старое)",
    "Кол-во (новое)",
    "Δ Кол-во",
    "Цена (старая)",
    "Цена (новая)",
    "Δ Цена",
    "Сумма (старая)",
    "Сумма (новая)",
    "Δ Сумма",
    "Δ %",
    "Статус",
]

NUMBER_FORMAT = "0.00"
PERCENT_FORMAT = "0.00\\%"  # literal percent sign; values are already percents
NAME_MERGE_END = 7
FILL_SUMMARY = PatternFill("solid", fgColor="EFEFEF")
BOLD = Font(bold=True)


class WorkbookWriteError(Exception):
    """Raised when the report cannot be saved."""


def _row_values(diff: DiffRow) -> list[object]:
    return [
        diff.item,
        diff.old_quantity,
        diff.new_quantity,
        diff.quantity_delta,
        diff.old_price,
        diff.new_price,
        diff.price_delta,
        diff.old_amount,
        diff.new_amount,
        diff.amount_delta,
        diff.amount_delta_percent,
        diff.status_text,
    ]


def _infer_col_widths(rows: list[list], min_width: int = 10, max_width: int = 60) -> list[int]:
    widths = [min_width] * len(HEADERS)
    for row in rows:
        for i, val in enumerate(row):
            if val is None:
                continue
            widths[i] = max(widths[i], min(max_width, len(str(val)) + 2))
    return widths


def _apply_number_formats(ws, row_index: int, first_column: int = 2) -> None:
    for column in range(first_column, 11):
        ws.cell(row_index, column).number_format = NUMBER_FORMAT
    ws.cell(row_index, 11).number_format = PERCENT_FORMAT


def write_report(result: ComparisonResult, output_path: Path) -> Path:
    """Write the report workbook and return its path."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = REPORT_SHEET

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = BOLD
    width_rows: list[list] = [list(HEADERS)]

    row_index = 2
    for n, group in enumerate(result.grouped()):
        if n > 0:
            row_index += 1

        for column in range(1, len(HEADERS) + 1):
            cell = ws.cell(row_index, column)
            cell.font = BOLD
            cell.fill = FILL_SUMMARY
        ws.merge_cells(start_row=row_index, start_column=1, end_row=row_index, end_column=NAME_MERGE_END)
        ws.cell(row_index, 1).value = group.product
        if group.summary is not None:
            ws.cell(row_index, 8).value = group.summary.old_amount
            ws.cell(row_index, 9).value = group.summary.new_amount
            ws.cell(row_index, 10).value = group.summary.amount_delta
            ws.cell(row_index, 11).value = group.summary.amount_delta_percent
        _apply_number_formats(ws, row_index, first_column=NAME_MERGE_END + 1)
        row_index += 1

        for diff in group.rows:
            values = _row_values(diff)
            for column, value in enumerate(values, start=1):
                ws.cell(row_index, column).value = value
            _apply_number_formats(ws, row_index)
            width_rows.append(values)
            row_index += 1

    for i, width in enumerate(_infer_col_widths(width_rows), start=1):
        ws.column_dimensions[get_column_letter(i)].width = width

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
    except OSError as e:
        raise WorkbookWriteError(f"cannot save report {output_path}: {e}") from e
    return output_path
