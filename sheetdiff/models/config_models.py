from __future__ import annotations

import locale
from dataclasses import dataclass, field
from decimal import Decimal

from .product_summary import DEFAULT_THRESHOLD_PERCENT

"""Config dataclasses for the snapshot comparison.

Number conventions, product markers, subtotal markers and the threshold are
carried here and passed into the extractor and aligner explicitly; nothing
reads them from module-level state.
"""

DEFAULT_PRODUCT = "Без указания продукции"
DEFAULT_LABEL_FALLBACK = "Row {row_number}"
DEFAULT_PRODUCT_MARKERS = ("продукц",)
DEFAULT_EXCLUDED_CONTAINS = ("итого",)
DEFAULT_EXCLUDED_PREFIXES = ("итого", "в т.ч.")
DEFAULT_ROMAN_NUMERAL_PATTERN = r"^[IVXLCDM]+\."
DEFAULT_NUMBER_LOCALES = ("current", "ru_RU", "invariant")


@dataclass(frozen=True)
class NumberConvention:
    """How one locale writes decimal numbers.

    Spaces of every kind are stripped before parsing, so they never need to
    be listed in ``group_marks``.
    """
    name: str
    decimal_mark: str
    group_marks: tuple[str, ...] = ()
    currency_symbols: tuple[str, ...] = ()

    @classmethod
    def from_current_locale(cls) -> NumberConvention:
        """Convention of the process locale (``locale.setlocale`` must have run for a user locale)."""
        conv = locale.localeconv()
        decimal_mark = str(conv.get("decimal_point") or ".")
        groups = tuple(
            g for g in (str(conv.get("thousands_sep") or ""), str(conv.get("mon_thousands_sep") or ""))
            if g and not g.isspace() and g != decimal_mark
        )
        symbol = str(conv.get("currency_symbol") or "")
        return cls(
            name="current",
            decimal_mark=decimal_mark,
            group_marks=tuple(dict.fromkeys(groups)),
            currency_symbols=(symbol,) if symbol else (),
        )


INVARIANT = NumberConvention("invariant", ".", (",",), ("¤",))

KNOWN_CONVENTIONS: dict[str, NumberConvention] = {
    "invariant": INVARIANT,
    "ru_RU": NumberConvention("ru_RU", ",", (), ("₽", "руб.", "р.")),
    "en_US": NumberConvention("en_US", ".", (",",), ("$",)),
    "en_GB": NumberConvention("en_GB", ".", (",",), ("£",)),
    "de_DE": NumberConvention("de_DE", ",", (".",), ("€",)),
    "fr_FR": NumberConvention("fr_FR", ",", (), ("€",)),
}


@dataclass(frozen=True)
class ExclusionConfig:
    """Label markers of subtotal/total rows that never appear as row-level differences."""
    contains: tuple[str, ...] = DEFAULT_EXCLUDED_CONTAINS
    prefixes: tuple[str, ...] = DEFAULT_EXCLUDED_PREFIXES
    roman_numeral_pattern: str = DEFAULT_ROMAN_NUMERAL_PATTERN
    apply_to_summaries: bool = True  # excluded rows are also left out of product totals


@dataclass(frozen=True)
class CompareConfig:
    """Root configuration of one comparison run."""
    threshold_percent: Decimal = DEFAULT_THRESHOLD_PERCENT
    default_product: str = DEFAULT_PRODUCT
    label_fallback: str = DEFAULT_LABEL_FALLBACK  # formatted with row_number=
    product_markers: tuple[str, ...] = DEFAULT_PRODUCT_MARKERS
    exclusion: ExclusionConfig = field(default_factory=ExclusionConfig)
    number_locales: tuple[str, ...] = DEFAULT_NUMBER_LOCALES
    display_decimal_mark: str = ","
    sheet: str | None = None  # None -> first worksheet
