"""Domain models for the spreadsheet snapshot comparison.

Cells of raw rows, extracted rows, diff rows, product summaries, the
comparison result and the configuration dataclasses. All of them are frozen.
"""

from .cell import Cell, RawRow
from .comparison_result import ComparisonResult, ProductGroup
from .config_models import CompareConfig, ExclusionConfig, NumberConvention
from .diff_row import DiffRow, DiffStatus
from .product_summary import ProductSummary
from .structured_row import StructuredRow

__all__ = [
    # Raw input
    "Cell",
    "RawRow",
    # Extraction / comparison
    "StructuredRow",
    "DiffRow",
    "DiffStatus",
    "ProductSummary",
    "ComparisonResult",
    "ProductGroup",
    # Configuration
    "CompareConfig",
    "ExclusionConfig",
    "NumberConvention",
]
