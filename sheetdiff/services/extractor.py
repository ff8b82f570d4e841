from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from ..models.cell import Cell
from ..models.config_models import CompareConfig
from ..models.structured_row import StructuredRow
from .number_parsing import numeric_value, resolve_conventions

"""Row extraction: raw worksheet rows -> StructuredRow.

Exports carry no column tags, so every row is read heuristically:
- the label is the first non-empty text cell that is not a number
- the first three numeric cells are quantity, price and amount
- a cell mentioning a product marker ("продукц...") switches the current
  product for the rows that follow
- rows without numbers are skipped (a header row without numbers only
  switches the product)
- repeated labels within a product get a " (n)" display suffix

Extraction never fails on messy input; every ambiguity resolves to a
deterministic fallback.
"""

__all__ = [
    "RowExtractor",
    "extract_rows",
]

logger = logging.getLogger(__name__)

PRODUCT_NAME_SEPARATORS = (":", "-", "—", "–")


class RowExtractor:
    """Extracts StructuredRows from one snapshot's raw rows.

    The extractor holds only immutable configuration; the per-run state
    (current product, occurrence counters) lives inside ``extract`` so one
    instance can process both snapshots.
    """

    def __init__(self, config: CompareConfig | None = None) -> None:
        self._config = config or CompareConfig()
        self._conventions = resolve_conventions(self._config.number_locales)
        self._markers = tuple(m.casefold() for m in self._config.product_markers if m)

    def extract(self, rows: Iterable[Sequence[Cell]]) -> list[StructuredRow]:
        result: list[StructuredRow] = []
        occurrences: dict[tuple[str, str], int] = {}
        current_product: str | None = None

        for row_number, cells in enumerate(rows, start=1):
            values = [numeric_value(cell, self._conventions) for cell in cells]
            numbers = [v for v in values if v is not None]

            product_name = self.product_name(cells)
            if product_name is not None:
                logger.debug(f"row {row_number}: product header '{product_name}'")
                current_product = product_name

            if not numbers:
                continue

            base_label = self._row_label(cells, values)
            if not base_label:
                base_label = self._config.label_fallback.format(row_number=row_number)

            product = current_product or self._config.default_product
            key = (product.casefold(), base_label.casefold())
            index = occurrences.get(key, 0)
            occurrences[key] = index + 1
            display_label = base_label if index == 0 else f"{base_label} ({index + 1})"

            quantity, price, amount = _first_three(numbers)
            result.append(
                StructuredRow(
                    product=product,
                    base_label=base_label,
                    display_label=display_label,
                    source_order=row_number,
                    quantity=quantity,
                    price=price,
                    amount=amount,
                )
            )

        logger.debug(f"extracted {len(result)} rows")
        return result

    @staticmethod
    def _row_label(cells: Sequence[Cell], values: Sequence[Decimal | None]) -> str:
        for cell, value in zip(cells, values):
            text = cell.text.strip()
            if text and value is None:
                return text
        return ""

    def _has_marker(self, text: str) -> bool:
        lower = text.casefold()
        return any(marker in lower for marker in self._markers)

    def product_name(self, cells: Sequence[Cell]) -> str | None:
        """Product name announced by a header row, or ``None`` for other rows.

        For each cell containing a product marker, in order:
        1. the text after a separator (":", "-", em dash, en dash)
        2. the next non-empty cell to the right
        3. the last line of a multi-line marker cell, unless it holds the marker itself
        """
        texts = [cell.text.strip() for cell in cells]
        for index, text in enumerate(texts):
            if not text or not self._has_marker(text):
                continue

            name = _text_after_separator(text)
            if name:
                return name

            following = next((t for t in texts[index + 1:] if t), None)
            if following:
                return following

            lines = [line.strip() for line in text.splitlines() if line.strip()]
            if len(lines) > 1 and not self._has_marker(lines[-1]):
                return lines[-1]
        return None


def _text_after_separator(text: str) -> str | None:
    for separator in PRODUCT_NAME_SEPARATORS:
        position = text.find(separator)
        if position < 0:
            continue
        candidate = text[position + 1:].strip()
        if candidate:
            return candidate
    return None


def _first_three(numbers: list[Decimal]) -> tuple[Decimal | None, Decimal | None, Decimal | None]:
    padded: list[Decimal | None] = [*numbers[:3], None, None, None]
    return padded[0], padded[1], padded[2]


def extract_rows(rows: Iterable[Sequence[Cell]], config: CompareConfig | None = None) -> list[StructuredRow]:
    """Convenience wrapper: ``RowExtractor(config).extract(rows)``."""
    return RowExtractor(config).extract(rows)
