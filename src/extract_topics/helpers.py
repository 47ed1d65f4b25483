"""Helper functions for extract_topics CLI."""

from __future__ import annotations

import argparse
from typing import Optional

from common.cli_helpers import add_batch_arguments, add_config_argument, add_output_arguments


def parse_extract_topics_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for extract_topics."""

    parser = argparse.ArgumentParser(description="Extract taxonomy topics for articles with fetched content")
    parser.add_argument(
        "--cleanup-orphans",
        action="store_true",
        help="Delete topics with no article links or outside the taxonomy",
    )
    add_batch_arguments(parser)
    add_config_argument(parser)
    add_output_arguments(parser)
    return parser.parse_args(argv)
