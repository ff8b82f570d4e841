# Shared pytest fixtures
from __future__ import annotations
import locale
import tempfile
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from sheetdiff.logging.init import reset_logging
from sheetdiff.models.cell import Cell
from sheetdiff.models.config_models import CompareConfig
from sheetdiff.models.structured_row import StructuredRow


@pytest.fixture(autouse=True)
def _isolate_process_state():
    # the CLI switches LC_NUMERIC to the user locale; keep tests on "C"
    saved = locale.setlocale(locale.LC_NUMERIC)
    reset_logging()
    yield
    reset_logging()
    locale.setlocale(locale.LC_NUMERIC, saved)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SHEETDIFF_CONFIG", raising=False)
        monkeypatch.delenv("SHEETDIFF_THRESHOLD", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """threshold_percent: 5
default_product: Без указания продукции
label_fallback: "Row {row_number}"
product_markers: [продукц]
exclusion:
  contains: [итого]
  prefixes: [итого, в т.ч.]
  roman_numeral_pattern: "^[IVXLCDM]+\\\\."
number_locales: [ru_RU, invariant]
display_decimal_mark: ","
sheet: null
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def fixed_config() -> CompareConfig:
    """Defaults without the process-locale convention, so parsing is deterministic."""
    return CompareConfig(number_locales=("ru_RU", "invariant"))


def make_workbook(path: Path, rows: list[list[object]], sheet: str = "Sheet1") -> Path:
    """Write ``rows`` to a real xlsx file without a header row."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


def text_row(*values: object) -> list[Cell]:
    """Raw row helper: str -> text cell, int/float/Decimal -> native number cell, None -> empty."""
    cells: list[Cell] = []
    for v in values:
        if v is None:
            cells.append(Cell())
        elif isinstance(v, str):
            cells.append(Cell.text_cell(v))
        else:
            cells.append(Cell.number_cell(Decimal(str(v))))
    return cells


def srow(
    product: str,
    label: str,
    order: int,
    quantity: object = None,
    price: object = None,
    amount: object = None,
    display: str | None = None,
) -> StructuredRow:
    def dec(v: object) -> Decimal | None:
        return None if v is None else Decimal(str(v))

    return StructuredRow(
        product=product,
        base_label=label,
        display_label=display or label,
        source_order=order,
        quantity=dec(quantity),
        price=dec(price),
        amount=dec(amount),
    )
