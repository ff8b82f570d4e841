from __future__ import annotations

import re
from decimal import Decimal

from sheetdiff.models.comparison_result import ComparisonResult
from sheetdiff.models.product_summary import ProductSummary
from sheetdiff.services.summary import render_status_line, render_summary_text

"""SUMMARY line format contract: per-product totals and the outcome line."""

AMOUNT = r"-?\d{1,3}(?:[\u00a0,]\d{3})*[.,]\d{2}"
PRODUCT_PATTERN = re.compile(
    rf"^Σ: (?P<old>{AMOUNT}) → (?P<new>{AMOUNT}) \(Δ (?P<delta>{AMOUNT}), (?P<pct>{AMOUNT}%|—)\)$"
)
STATUS_PATTERN = re.compile(
    r"^(No differences found\.|Data is identical\.|Found (?P<n>[0-9]+) rows with differences\.)$"
)


def test_product_line_matches_contract():
    m = PRODUCT_PATTERN.match(render_summary_text(ProductSummary.create("A", Decimal("1500"), Decimal("-20.5"))))
    assert m, "summary text should match contract regex"
    assert m.group("old") == "1\u00a0500,00"
    assert m.group("new") == "-20,50"
    assert m.group("pct") == "-101,37%"


def test_product_line_without_percent_matches_contract():
    s = ProductSummary("A", Decimal("0"), Decimal("0"), Decimal("0"), None)
    m = PRODUCT_PATTERN.match(render_summary_text(s, decimal_mark="."))
    assert m
    assert m.group("pct") == "—"


def test_status_line_matches_contract():
    assert STATUS_PATTERN.match(render_status_line(ComparisonResult()))
