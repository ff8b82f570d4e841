from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Cell model for raw worksheet rows.

A raw row is an ordered list of ``Cell``. A cell always has display text and
carries ``number`` only when the source cell was natively numeric; text cells
that merely look numeric are classified later by
``sheetdiff.services.number_parsing``.
"""

__all__ = [
    "Cell",
    "RawRow",
]


@dataclass(frozen=True)
class Cell:
    text: str = ""  # display string as the source renders it
    number: Decimal | None = None  # native numeric value, if the cell is numerically typed

    @classmethod
    def text_cell(cls, text: str) -> Cell:
        return cls(text=text)

    @classmethod
    def number_cell(cls, value: Decimal, text: str | None = None) -> Cell:
        return cls(text=str(value) if text is None else text, number=value)

    @property
    def is_native_number(self) -> bool:
        return self.number is not None

    @property
    def is_blank(self) -> bool:
        return self.number is None and not self.text.strip()


RawRow = list[Cell]
