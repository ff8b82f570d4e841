from __future__ import annotations

import re
from dataclasses import dataclass

from ..models.config_models import ExclusionConfig

"""Subtotal/total row detection.

Rows such as "Итого", "в т.ч. ..." or section lines like "II. Материалы:" are
summaries of other rows. They are left out of the row-level diff; product
totals are carried by ProductSummary instead.
"""

__all__ = [
    "ExclusionRules",
]


@dataclass(frozen=True)
class ExclusionRules:
    contains: tuple[str, ...]
    prefixes: tuple[str, ...]
    roman_pattern: re.Pattern[str]

    @classmethod
    def from_config(cls, config: ExclusionConfig | None = None) -> ExclusionRules:
        config = config or ExclusionConfig()
        return cls(
            contains=tuple(m.casefold() for m in config.contains),
            prefixes=tuple(p.casefold() for p in config.prefixes),
            roman_pattern=re.compile(config.roman_numeral_pattern, re.IGNORECASE),
        )

    def is_excluded(self, label: str | None) -> bool:
        if label is None or not label.strip():
            return False
        trimmed = label.strip()
        lower = trimmed.casefold()
        if any(marker in lower for marker in self.contains):
            return True
        if any(lower.startswith(prefix) for prefix in self.prefixes):
            return True
        return self.roman_pattern.match(trimmed) is not None and ":" in trimmed
