from __future__ import annotations

import json
import re
from decimal import Decimal
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_EXCLUDED_CONTAINS,
    DEFAULT_EXCLUDED_PREFIXES,
    DEFAULT_LABEL_FALLBACK,
    DEFAULT_NUMBER_LOCALES,
    DEFAULT_PRODUCT,
    DEFAULT_PRODUCT_MARKERS,
    DEFAULT_ROMAN_NUMERAL_PATTERN,
    CompareConfig,
    ExclusionConfig,
)
from ..models.product_summary import DEFAULT_THRESHOLD_PERCENT

"""Config loader.

Responsibilities:
- Load YAML config (config/compare.yml by default)
- Validate against compare_schema.json (shipped next to this module)
- Apply defaults for every missing key
- Reject values the extractor could not use (bad regex, bad fallback template)
"""

SCHEMA_PATH = Path(__file__).with_name("compare_schema.json")
DEFAULT_CONFIG_PATH = Path("config/compare.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data violates the schema (unknown keys, wrong types).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_dict(data: dict[str, Any]) -> CompareConfig:
    """Build a CompareConfig from already validated data, filling defaults."""
    excl_raw = data.get("exclusion") or {}
    pattern = excl_raw.get("roman_numeral_pattern", DEFAULT_ROMAN_NUMERAL_PATTERN)
    try:
        re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"invalid roman_numeral_pattern: {e}") from e

    label_fallback = data.get("label_fallback", DEFAULT_LABEL_FALLBACK)
    try:
        label_fallback.format(row_number=1)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"invalid label_fallback template: {label_fallback!r}") from e

    exclusion = ExclusionConfig(
        contains=tuple(excl_raw.get("contains", DEFAULT_EXCLUDED_CONTAINS)),
        prefixes=tuple(excl_raw.get("prefixes", DEFAULT_EXCLUDED_PREFIXES)),
        roman_numeral_pattern=pattern,
        apply_to_summaries=bool(excl_raw.get("apply_to_summaries", True)),
    )
    threshold = data.get("threshold_percent")
    return CompareConfig(
        # str() first so 0.1 stays 0.1 rather than its binary expansion
        threshold_percent=Decimal(str(threshold)) if threshold is not None else DEFAULT_THRESHOLD_PERCENT,
        default_product=data.get("default_product", DEFAULT_PRODUCT),
        label_fallback=label_fallback,
        product_markers=tuple(data.get("product_markers", DEFAULT_PRODUCT_MARKERS)),
        exclusion=exclusion,
        number_locales=tuple(data.get("number_locales", DEFAULT_NUMBER_LOCALES)),
        display_decimal_mark=data.get("display_decimal_mark", ","),
        sheet=data.get("sheet"),
    )


def load_config(path: Path | None = None) -> CompareConfig:
    """Load and validate a config file; ``None`` yields the built-in defaults."""
    if path is None:
        return CompareConfig()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    return config_from_dict(data)
