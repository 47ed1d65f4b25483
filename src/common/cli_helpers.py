"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_comma_list(value: str | None) -> list[str]:
    """Split a comma-separated CLI value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: $CONFIG_ENV or 'prod')",
    )


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the --load-rds/--load-local flags shared by every stage."""
    parser.add_argument("--load-rds", action="store_true", help="Write results to the database")
    parser.add_argument("--load-local", action="store_true", help="Save results to a local JSONL file")


def add_batch_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the --concurrency/--batch-limit flags used by the enrichment stages."""
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Worker threads for per-article work (default: from config)",
    )
    parser.add_argument(
        "--batch-limit",
        type=int,
        default=None,
        help="Max articles selected per run (default: from config)",
    )
