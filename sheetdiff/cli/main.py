from __future__ import annotations

import argparse
import locale
import os
import sys
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.writer import WorkbookWriteError, write_report
from ..logging.init import log_summary, setup_logging
from ..services.comparison import ComparisonError, compare_files
from ..services.summary import render_status_line, render_summary_text

"""CLI entrypoint.

    sheetdiff OLD.xlsx NEW.xlsx [-o report.xlsx] [--threshold 5] [--config path] [--debug]

Flow:
- Load .env (SHEETDIFF_CONFIG / SHEETDIFF_THRESHOLD)
- Load config (explicit path > SHEETDIFF_CONFIG > config/compare.yml if present > defaults)
- Compare both workbooks, log per-product totals and the outcome as SUMMARY lines
- Optionally write the xlsx report
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

ENV_CONFIG = "SHEETDIFF_CONFIG"
ENV_THRESHOLD = "SHEETDIFF_THRESHOLD"


def _decimal_arg(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from e
    if not value.is_finite() or value < 0:
        raise argparse.ArgumentTypeError(f"threshold must be a non-negative number: {text!r}")
    return value


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="sheetdiff",
        description="Compare two spreadsheet snapshots of product quantities, prices and amounts",
    )
    p.add_argument("old", type=Path, help="Old snapshot workbook (.xlsx)")
    p.add_argument("new", type=Path, help="New snapshot workbook (.xlsx)")
    p.add_argument("-o", "--output", type=Path, help="Write the difference report to this .xlsx file")
    p.add_argument("--threshold", type=_decimal_arg, help="Materiality threshold in percent (default 5)")
    p.add_argument("--config", type=Path, help="YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; process environment wins unless ``override``."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _resolve_config_path(explicit: Path | None) -> Path | None:
    if explicit is not None:
        return explicit
    env_path = os.getenv(ENV_CONFIG)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def _use_user_locale(logger) -> None:
    # the "current" number convention reads localeconv(); start from the user's locale
    try:
        locale.setlocale(locale.LC_NUMERIC, "")
    except locale.Error as e:
        logger.debug(f"user locale unavailable, keeping C numeric locale: {e}")


def main(argv: list[str] | None = None) -> int:
    # None -> sys.argv; an explicit [] must not pick up pytest's own arguments
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    _use_user_locale(logger)

    try:
        cfg = load_config(_resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    threshold = args.threshold
    env_threshold = os.getenv(ENV_THRESHOLD)
    if threshold is None and env_threshold:
        try:
            threshold = _decimal_arg(env_threshold)
        except argparse.ArgumentTypeError as e:
            logger.error(f"{ENV_THRESHOLD}: {e}")
            return EXIT_FATAL
    if threshold is not None:
        cfg = replace(cfg, threshold_percent=threshold)

    logger.info(f"Comparing {args.old} -> {args.new} (threshold {cfg.threshold_percent}%)")
    try:
        result = compare_files(args.old, args.new, cfg)
    except ComparisonError as e:
        logger.error(f"compare: {e}")
        return EXIT_FATAL

    for group in result.grouped():
        if group.summary is not None:
            log_summary(f"{group.product} {render_summary_text(group.summary, cfg.display_decimal_mark)}")

    if args.output is not None:
        if not result.has_results:
            logger.info("nothing to export: no rows in the report")
        else:
            try:
                saved = write_report(result, args.output)
            except WorkbookWriteError as e:
                logger.error(f"export: {e}")
                return EXIT_FATAL
            logger.info(f"report saved: {saved}")

    log_summary(render_status_line(result))
    return EXIT_SUCCESS
