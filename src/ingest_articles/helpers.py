"""Helper functions for ingest_articles CLI."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from common.cli_helpers import add_config_argument, add_output_arguments, parse_comma_list
from common.config import PullConfig
from ingest_articles.fetch_articles.sources import SourceRegistry
from ingest_articles.ingest_articles import build_pull_options
from ingest_articles.models import PullOptions

logger = logging.getLogger(__name__)


def parse_sources(value: str | None, registry: SourceRegistry) -> list[str]:
    '''Parse the --sources argument into a list of registry ids.'''

    # Empty or "all" selects every source
    if not value or value.strip().lower() == "all":
        return []

    parsed = [s for s in parse_comma_list(value) if s.lower() != "all"]

    for source_id in parsed:
        if source_id.lower() not in registry:
            logger.warning("Invalid source: %s", source_id)

    sources = [s for s in parsed if s.lower() in registry]

    if not sources:
        raise ValueError(f"No valid sources provided. Valid sources: {', '.join(sorted(registry.ids))}")

    return sources


def add_pull_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated list of source ids (default: all).",
    )
    parser.add_argument("--limit", type=int, default=None, help="Max articles kept after dedup")
    parser.add_argument("--max-per-source", type=int, default=None)
    parser.add_argument("--since-hours", type=int, default=None)
    parser.add_argument("--timeout", type=float, default=None, help="Feed request timeout in seconds")


def parse_ingest_articles_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_articles.'''

    parser = argparse.ArgumentParser(description="Pull and rank articles from the defense feed registry")
    add_pull_arguments(parser)
    add_config_argument(parser)
    add_output_arguments(parser)
    return parser.parse_args(argv)


def _override(value, default):
    return default if value is None else value


def resolve_pull_options(args: argparse.Namespace, config: PullConfig) -> PullOptions:
    '''CLI flags win over config values; the result is clamped.'''

    return build_pull_options(
        max_per_source=_override(args.max_per_source, config.max_per_source),
        limit=_override(args.limit, config.limit),
        since_hours=_override(args.since_hours, config.since_hours),
        timeout_seconds=_override(args.timeout, config.timeout_seconds),
        max_workers=config.max_workers,
        user_agent=config.user_agent,
    )
