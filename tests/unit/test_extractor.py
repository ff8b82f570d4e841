from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest
from conftest import text_row

from sheetdiff.models.cell import Cell
from sheetdiff.models.config_models import CompareConfig
from sheetdiff.services.extractor import RowExtractor, extract_rows

"""Unit tests for the row extractor heuristics."""

D = Decimal


@pytest.fixture()
def extractor(fixed_config: CompareConfig) -> RowExtractor:
    return RowExtractor(fixed_config)


def test_basic_row_with_three_numbers(extractor):
    rows = extractor.extract([text_row("Item1", 10, 2, 20)])
    assert len(rows) == 1
    row = rows[0]
    assert row.product == "Без указания продукции"
    assert row.base_label == "Item1"
    assert row.display_label == "Item1"
    assert row.source_order == 1
    assert (row.quantity, row.price, row.amount) == (D("10"), D("2"), D("20"))


def test_fewer_numbers_leave_fields_absent(extractor):
    (row,) = extractor.extract([text_row("Only amount", 50)])
    assert row.quantity == D("50")
    assert row.price is None
    assert row.amount is None


def test_numbers_beyond_third_are_ignored(extractor):
    (row,) = extractor.extract([text_row("Wide", 1, 2, 3, 4, 5)])
    assert (row.quantity, row.price, row.amount) == (D("1"), D("2"), D("3"))


def test_numeric_text_cells_count_as_numbers(extractor):
    (row,) = extractor.extract([text_row("Цемент", "1 000", "12,50", "12 500,00")])
    assert row.base_label == "Цемент"
    assert (row.quantity, row.price, row.amount) == (D("1000"), D("12.50"), D("12500.00"))


def test_label_is_first_non_numeric_text(extractor):
    (row,) = extractor.extract([text_row(None, "  ", 5, "  Болт М8  ", "шт", 2, 10)])
    assert row.base_label == "Болт М8"
    assert (row.quantity, row.price, row.amount) == (D("5"), D("2"), D("10"))


def test_rows_without_numbers_are_skipped(extractor):
    rows = extractor.extract(
        [
            text_row("Title of the export"),
            [],
            text_row("Item", 1, 1, 1),
        ]
    )
    assert [r.base_label for r in rows] == ["Item"]
    assert rows[0].source_order == 3


def test_label_fallback_uses_row_position(extractor):
    rows = extractor.extract([text_row("header only"), text_row(1, 2, 3)])
    assert rows[0].base_label == "Row 2"
    assert rows[0].display_label == "Row 2"


def test_label_fallback_template_is_configurable(fixed_config):
    cfg = replace(fixed_config, label_fallback="Строка {row_number}")
    (row,) = extract_rows([text_row(7)], cfg)
    assert row.base_label == "Строка 1"


def test_product_header_with_colon(extractor):
    rows = extractor.extract(
        [
            text_row("Вид продукции: Молоко"),
            text_row("Пакет 1л", 10, 80, 800),
        ]
    )
    assert len(rows) == 1
    assert rows[0].product == "Молоко"


@pytest.mark.parametrize("separator", ["-", "—", "–"])
def test_product_header_with_dashes(extractor, separator):
    (row,) = extractor.extract([text_row(f"Продукция {separator} Сыр"), text_row("Брус", 1, 2, 2)])
    assert row.product == "Сыр"


def test_product_header_separator_with_empty_tail_tries_next_separator(extractor):
    (row,) = extractor.extract([text_row("Продукция - Кефир:"), text_row("A", 1)])
    assert row.product == "Кефир:"


def test_product_header_next_cell(extractor):
    (row,) = extractor.extract([text_row("ПРОДУКЦИЯ", None, "  Творог  "), text_row("A", 1)])
    assert row.product == "Творог"


def test_product_header_multiline_last_line(extractor):
    (row,) = extractor.extract([text_row("Наименование продукции\nСметана"), text_row("A", 1)])
    assert row.product == "Сметана"


def test_product_header_next_cell_takes_priority_over_last_line(extractor):
    (row,) = extractor.extract([text_row("Наименование продукции\nСметана", "Йогурт"), text_row("A", 1)])
    assert row.product == "Йогурт"


def test_multiline_last_line_with_marker_is_not_a_name(extractor):
    rows = extractor.extract([text_row("Наименование\nпродукции"), text_row("A", 1)])
    assert rows[0].product == "Без указания продукции"


def test_marker_without_name_is_not_a_header(extractor):
    rows = extractor.extract(
        [
            text_row("Продукция: Молоко"),
            text_row("Продукция"),
            text_row("A", 1),
        ]
    )
    assert rows[0].product == "Молоко"


def test_header_context_applies_until_next_header(extractor):
    rows = extractor.extract(
        [
            text_row("A", 1),
            text_row("Продукция: P1"),
            text_row("B", 2),
            text_row("C", 3),
            text_row("Продукция: P2"),
            text_row("D", 4),
        ]
    )
    assert [(r.base_label, r.product) for r in rows] == [
        ("A", "Без указания продукции"),
        ("B", "P1"),
        ("C", "P1"),
        ("D", "P2"),
    ]


def test_header_row_with_numbers_is_also_data(extractor):
    rows = extractor.extract([text_row("Продукция: Масло", 5, 100, 500), text_row("X", 1)])
    assert len(rows) == 2
    assert rows[0].product == "Масло"
    assert rows[0].base_label == "Продукция: Масло"
    assert rows[0].amount == D("500")
    assert rows[1].product == "Масло"


def test_duplicate_labels_are_numbered_per_product(extractor):
    rows = extractor.extract(
        [
            text_row("Продукция: P1"),
            text_row("Болт", 1),
            text_row("болт", 2),
            text_row("Гайка", 3),
            text_row("Болт", 4),
            text_row("Продукция: P2"),
            text_row("Болт", 5),
        ]
    )
    assert [r.display_label for r in rows] == ["Болт", "болт (2)", "Гайка", "Болт (3)", "Болт"]
    assert [r.base_label for r in rows] == ["Болт", "болт", "Гайка", "Болт", "Болт"]


def test_duplicate_counters_do_not_leak_between_runs(extractor):
    first = extractor.extract([text_row("Болт", 1), text_row("Болт", 2)])
    second = extractor.extract([text_row("Болт", 1)])
    assert [r.display_label for r in first] == ["Болт", "Болт (2)"]
    assert [r.display_label for r in second] == ["Болт"]


def test_source_order_is_strictly_increasing(extractor):
    raw = [
        text_row("Продукция: P"),
        text_row("A", 1),
        text_row("no numbers"),
        text_row("B", 2),
        text_row("C", 3),
    ]
    orders = [r.source_order for r in extractor.extract(raw)]
    assert orders == sorted(set(orders))
    assert orders == [2, 4, 5]


def test_native_number_text_is_not_a_label(extractor):
    cell = Cell(text="42", number=D("42"))
    (row,) = extractor.extract([[cell, Cell.text_cell("Label")]])
    assert row.base_label == "Label"
    assert row.quantity == D("42")


def test_custom_product_marker(fixed_config):
    cfg = replace(fixed_config, product_markers=("product",), default_product="n/a")
    rows = extract_rows([text_row("x", 1), text_row("Product: Widgets"), text_row("y", 2)], cfg)
    assert [r.product for r in rows] == ["n/a", "Widgets"]
