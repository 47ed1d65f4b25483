"""Helper functions for extract_content CLI."""

from __future__ import annotations

import argparse
from typing import Optional

from common.cli_helpers import add_batch_arguments, add_config_argument, add_output_arguments


def parse_extract_content_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for extract_content."""

    parser = argparse.ArgumentParser(description="Fetch article pages and extract their main text")
    parser.add_argument(
        "--url",
        default=None,
        help="Extract a single article URL and print the result instead of reading the database",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Article request timeout in seconds")
    add_batch_arguments(parser)
    add_config_argument(parser)
    add_output_arguments(parser)
    return parser.parse_args(argv)
