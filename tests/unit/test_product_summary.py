from __future__ import annotations

from decimal import Decimal

import pytest
from conftest import srow

from sheetdiff.models.comparison_result import ComparisonResult
from sheetdiff.models.diff_row import DiffRow
from sheetdiff.models.product_summary import ProductSummary
from sheetdiff.services.summary import (
    calculate_product_summaries,
    format_amount,
    render_status_line,
    render_summary_text,
    sum_amounts,
)

"""Unit tests for product summaries, aggregation and summary rendering."""

D = Decimal


def test_create_rounds_and_computes_delta():
    s = ProductSummary.create("A", D("20.004"), D("25.005"))
    assert s.old_amount == D("20.00")
    assert s.new_amount == D("25.01")
    assert s.amount_delta == D("5.01")
    assert s.amount_delta_percent == D("25.05")


def test_delta_is_difference_of_rounded_totals():
    s = ProductSummary.create("A", D("0.004"), D("0.006"))
    assert s.amount_delta == s.new_amount - s.old_amount == D("0.01")


@pytest.mark.parametrize(
    "old, new, threshold, expected",
    [
        ("100", "105", "5", True),  # exactly at threshold
        ("100", "104.99", "5", False),
        ("100", "90", "5", True),  # negative change uses abs
        ("0", "50", "5", True),
        ("50", "0", "5", True),
        ("0", "0", "5", False),
        ("100", "101", "0", True),
        ("100", "100", "0", True),  # 0 >= 0
    ],
)
def test_should_display(old, new, threshold, expected):
    assert ProductSummary.create("A", D(old), D(new)).should_display(D(threshold)) is expected


def test_should_display_without_percent_falls_back_to_delta():
    no_change = ProductSummary("A", D("0"), D("0"), D("0"), None)
    changed = ProductSummary("A", D("0"), D("1"), D("1"), None)
    assert not no_change.should_display()
    assert changed.should_display()


def test_sum_amounts_treats_absent_as_zero_and_ignores_case():
    rows = [srow("P", "a", 1, amount=10), srow("p", "b", 2, 1, 2), srow("Q", "c", 3, amount=5)]
    assert sum_amounts(rows, "P") == D("10")


def test_calculate_product_summaries_union_of_products():
    old = [srow("A", "x", 1, amount=20), srow("C", "z", 2, amount=7)]
    new = [srow("a", "x", 1, amount=25), srow("B", "y", 2, amount=50)]
    summaries = calculate_product_summaries(old, new)
    assert list(summaries) == ["A", "C", "B"]
    assert summaries["A"].new_amount == D("25.00")
    assert summaries["B"].old_amount == D("0.00")
    assert summaries["B"].amount_delta_percent == D("100")
    assert summaries["C"].new_amount == D("0.00")
    assert summaries["C"].amount_delta_percent == D("-100")


def test_excluded_rows_left_out_of_totals_by_default():
    old = [srow("A", "x", 1, amount=20), srow("A", "Итого", 2, amount=20)]
    new = [srow("A", "x", 1, amount=25), srow("A", "Итого", 2, amount=25)]
    assert calculate_product_summaries(old, new)["A"].new_amount == D("25.00")
    including = calculate_product_summaries(old, new, apply_exclusion=False)
    assert including["A"].new_amount == D("50.00")


def test_format_amount():
    assert format_amount(D("1234567.891")) == "1\u00a0234\u00a0567,89"
    assert format_amount(D("-5"), decimal_mark=".") == "-5.00"
    assert format_amount(D("1000"), decimal_mark=".", group_mark=" ") == "1 000.00"


def test_render_summary_text():
    s = ProductSummary.create("A", D("20"), D("25"))
    assert render_summary_text(s) == "Σ: 20,00 → 25,00 (Δ 5,00, 25,00%)"


def test_render_summary_text_without_percent():
    s = ProductSummary("A", D("0"), D("0"), D("0"), None)
    assert render_summary_text(s, decimal_mark=".") == "Σ: 0.00 → 0.00 (Δ 0.00, —)"


def test_render_status_line():
    unchanged = DiffRow.from_pair("A", "x", srow("A", "x", 1, 1), srow("A", "x", 1, 1))
    added = DiffRow.from_pair("A", "y", None, srow("A", "y", 2, 1))
    assert render_status_line(ComparisonResult()) == "No differences found."
    assert render_status_line(ComparisonResult(rows=[unchanged])) == "Data is identical."
    assert render_status_line(ComparisonResult(rows=[unchanged, added])) == "Found 1 rows with differences."
