from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from decimal import Decimal, InvalidOperation

from ..models.cell import Cell
from ..models.config_models import KNOWN_CONVENTIONS, NumberConvention

"""Decimal parsing of cell text under an ordered list of locale conventions.

A cell is numeric when it carries a native number, or when its text parses
under one of the conventions; the first convention that accepts the text
wins. Parsing is lenient in the way spreadsheet "any number" styles are:
leading or trailing sign, accounting parentheses, group separators inside
the integer part, an exponent, and a currency symbol at either end.
"""

__all__ = [
    "parse_decimal",
    "numeric_value",
    "resolve_conventions",
    "normalize_number_text",
]

logger = logging.getLogger(__name__)

# regular, no-break, narrow no-break, thin
_SPACE_CHARS = (" ", "\u00a0", "\u202f", "\u2009")

# largest magnitude spreadsheet "any number" parsing accepts; beyond it the cell stays text
MAX_MAGNITUDE = Decimal("79228162514264337593543950335")

_pattern_cache: dict[tuple[str, tuple[str, ...]], re.Pattern[str]] = {}


def resolve_conventions(names: Iterable[str]) -> tuple[NumberConvention, ...]:
    """Map configured locale names to conventions; unknown names are skipped with a warning."""
    resolved: list[NumberConvention] = []
    for name in names:
        if name == "current":
            resolved.append(NumberConvention.from_current_locale())
        elif name in KNOWN_CONVENTIONS:
            resolved.append(KNOWN_CONVENTIONS[name])
        else:
            logger.warning(f"unknown number locale '{name}' ignored")
    return tuple(resolved)


def normalize_number_text(text: str) -> str:
    normalized = text.strip()
    for ch in _SPACE_CHARS:
        normalized = normalized.replace(ch, "")
    return normalized


def _number_pattern(convention: NumberConvention) -> re.Pattern[str]:
    key = (convention.decimal_mark, convention.group_marks)
    pattern = _pattern_cache.get(key)
    if pattern is None:
        group = "".join(re.escape(g) for g in convention.group_marks)
        # a group mark must sit between digits of the integer part
        integer = rf"\d(?:\d|[{group}](?=\d))*" if group else r"\d+"
        pattern = re.compile(
            rf"(?P<int>{integer})?"
            rf"(?:{re.escape(convention.decimal_mark)}(?P<frac>\d*))?"
            r"(?:[eE](?P<exp>[+-]?\d+))?"
        )
        _pattern_cache[key] = pattern
    return pattern


def _strip_currency(text: str, symbols: Sequence[str]) -> str:
    for symbol in symbols:
        if text.startswith(symbol):
            return text[len(symbol):]
        if text.endswith(symbol):
            return text[: -len(symbol)]
    return text


def parse_decimal(text: str, convention: NumberConvention) -> Decimal | None:
    """Parse already space-normalized text; ``None`` when the convention rejects it.

    Examples:
        >>> ru = KNOWN_CONVENTIONS["ru_RU"]
        >>> parse_decimal("1234,50", ru)
        Decimal('1234.50')
        >>> parse_decimal("1,234.50", KNOWN_CONVENTIONS["invariant"])
        Decimal('1234.50')
        >>> parse_decimal("1.5", ru) is None
        True
        >>> parse_decimal("1E30", ru) is None
        True
    """
    s = text
    if not s:
        return None

    negative = False
    if len(s) > 2 and s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]

    s = _strip_currency(s, convention.currency_symbols)
    sign = ""
    if s[:1] in ("+", "-"):
        sign, s = s[0], s[1:]
    elif s[-1:] in ("+", "-"):
        sign, s = s[-1], s[:-1]
    if sign and negative:
        return None
    # "-$5" / "$-5"
    s = _strip_currency(s, convention.currency_symbols)

    match = _number_pattern(convention).fullmatch(s)
    if match is None:
        return None
    int_part = match.group("int") or ""
    frac_part = match.group("frac") or ""
    if not int_part and not frac_part:
        return None
    for g in convention.group_marks:
        int_part = int_part.replace(g, "")

    literal = f"{int_part or '0'}.{frac_part}" if frac_part else (int_part or "0")
    if match.group("exp"):
        literal += f"E{match.group('exp')}"
    try:
        value = Decimal(literal)
    except InvalidOperation:  # pragma: no cover - the pattern only admits valid literals
        return None
    if abs(value) > MAX_MAGNITUDE:
        return None
    if negative or sign == "-":
        value = -value
    return value


def numeric_value(cell: Cell, conventions: Sequence[NumberConvention]) -> Decimal | None:
    """Numeric value of a cell, or ``None`` when the cell is text."""
    if cell.number is not None:
        return cell.number
    normalized = normalize_number_text(cell.text)
    if not normalized:
        return None
    for convention in conventions:
        value = parse_decimal(normalized, convention)
        if value is not None:
            return value
    return None
