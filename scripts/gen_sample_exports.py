#!/usr/bin/env python3
"""Sample export generator for manual and integration testing.

Writes a pair of synthetic "old" and "new" workbooks laid out like the
accounting exports sheetdiff reads:
- Row 1: Title row
- Row 2: Column header row
- Per product: a "Вид продукции: ..." header row, item rows
  (label, unit, quantity, price, amount) and an "Итого" subtotal row

The new export derives from the old one: some prices change, some items are
removed and some are added, so comparing the two yields every diff status.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

HEADER_ROW = ["Наименование", "Ед.", "Кол-во", "Цена", "Сумма"]
UNITS = ["шт", "кг", "л", "м", "уп"]


def format_ru(value: float) -> str:
    """Russian-style number text: space as group mark, comma as decimal mark."""
    return f"{value:,.2f}".replace(",", " ").replace(".", ",")


def _item_rows(items: list[dict[str, Any]], text_numbers: bool) -> list[list[Any]]:
    rows = []
    for item in items:
        amount = round(item["quantity"] * item["price"], 2)
        if text_numbers:
            rows.append([item["label"], item["unit"], item["quantity"], format_ru(item["price"]), format_ru(amount)])
        else:
            rows.append([item["label"], item["unit"], item["quantity"], item["price"], amount])
    return rows


def _snapshot(title: str, products: dict[str, list[dict[str, Any]]], text_numbers: bool) -> list[list[Any]]:
    rows: list[list[Any]] = [[title, None, None, None, None], list(HEADER_ROW)]
    for product, items in products.items():
        rows.append([f"Вид продукции: {product}", None, None, None, None])
        rows.extend(_item_rows(items, text_numbers))
        total = round(sum(round(i["quantity"] * i["price"], 2) for i in items), 2)
        rows.append(["Итого", None, None, None, format_ru(total) if text_numbers else total])
    return rows


def generate_snapshot_pair(
    products: int,
    items_per_product: int,
    change_rate: float = 0.2,
    seed: int = 42,
    text_numbers: bool = False,
) -> tuple[list[list[Any]], list[list[Any]]]:
    """Generate old and new export rows.

    Args:
        products: Number of products per export
        items_per_product: Item rows per product in the old export
        change_rate: Share of items whose price changes; half as many are removed
        seed: Random seed for reproducible data
        text_numbers: Write price and amount as Russian-formatted text

    Returns:
        (old_rows, new_rows), each a list of raw sheet rows
    """
    np.random.seed(seed)

    old: dict[str, list[dict[str, Any]]] = {}
    new: dict[str, list[dict[str, Any]]] = {}
    for p in range(1, products + 1):
        name = f"Продукт {p}"
        old_items = [
            {
                "label": f"Позиция {i}",
                "unit": UNITS[np.random.randint(len(UNITS))],
                "quantity": int(np.random.randint(1, 500)),
                "price": round(float(np.random.uniform(0.5, 2000)), 2),
            }
            for i in range(1, items_per_product + 1)
        ]
        new_items = []
        for item in old_items:
            roll = np.random.random()
            if roll < change_rate / 2:
                continue  # removed
            changed = dict(item)
            if roll < change_rate * 1.5:
                changed["price"] = round(item["price"] * float(np.random.uniform(0.8, 1.3)), 2)
            new_items.append(changed)
        for k in range(int(np.random.randint(0, 3))):
            new_items.append(
                {
                    "label": f"Новая позиция {p}.{k + 1}",
                    "unit": UNITS[0],
                    "quantity": int(np.random.randint(1, 100)),
                    "price": round(float(np.random.uniform(1, 100)), 2),
                }
            )
        old[name] = old_items
        new[name] = new_items

    return (
        _snapshot("Выгрузка (старая)", old, text_numbers),
        _snapshot("Выгрузка (новая)", new, text_numbers),
    )


def write_export(output_path: Path, rows: list[list[Any]], sheet_name: str = "Лист1") -> Path:
    """Write raw rows to an xlsx file without a header row."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return output_path


def main() -> int:
    """Main CLI interface for sample export generation."""
    parser = argparse.ArgumentParser(
        description="Generate a pair of synthetic exports for sheetdiff",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 5 products with 20 items each into ./samples
  %(prog)s samples

  # Russian-formatted text numbers, more churn
  %(prog)s samples --products 10 --items 50 --change-rate 0.4 --text-numbers
        """
    )
    parser.add_argument("output_dir", type=Path, help="Directory for old.xlsx and new.xlsx")
    parser.add_argument("--products", type=int, default=5, help="Number of products (default: 5)")
    parser.add_argument("--items", type=int, default=20, help="Items per product (default: 20)")
    parser.add_argument("--change-rate", type=float, default=0.2, help="Share of changed items (default: 0.2)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data (default: 42)")
    parser.add_argument("--text-numbers", action="store_true", help="Store prices and amounts as text")
    args = parser.parse_args()

    if args.products <= 0 or args.items <= 0:
        print("Error: --products and --items must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.change_rate <= 1:
        print("Error: --change-rate must be between 0 and 1", file=sys.stderr)
        return 1

    old_rows, new_rows = generate_snapshot_pair(
        args.products, args.items, args.change_rate, args.seed, args.text_numbers
    )
    try:
        old_path = write_export(args.output_dir / "old.xlsx", old_rows)
        new_path = write_export(args.output_dir / "new.xlsx", new_rows)
    except OSError as e:
        print(f"Error writing exports: {e}", file=sys.stderr)
        return 1

    print(f"Created {old_path} ({len(old_rows)} rows)")
    print(f"Created {new_path} ({len(new_rows)} rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
