"""Helper functions for classify_articles CLI."""

from __future__ import annotations

import argparse
from typing import Optional

from common.cli_helpers import add_batch_arguments, add_config_argument, add_output_arguments


def parse_classify_articles_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for classify_articles."""

    parser = argparse.ArgumentParser(description="Tag stored articles that were never classified")
    add_batch_arguments(parser)
    add_config_argument(parser)
    add_output_arguments(parser)
    return parser.parse_args(argv)
