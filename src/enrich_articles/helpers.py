"""Helper functions for the run-pipeline CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Optional

from common.cli_helpers import add_batch_arguments, add_config_argument
from common.config import PipelineConfig
from ingest_articles.helpers import add_pull_arguments


def parse_run_pipeline_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for run_pipeline."""

    parser = argparse.ArgumentParser(description="Pull, persist and enrich defense news in one run")
    add_pull_arguments(parser)
    add_batch_arguments(parser)
    parser.add_argument(
        "--cleanup-orphans",
        action="store_true",
        help="Delete topics with no article links after the run",
    )
    parser.add_argument("--load-local", action="store_true", help="Save the run summary to a local JSONL file")
    add_config_argument(parser)
    return parser.parse_args(argv)


def _overrides(**values) -> dict:
    return {key: value for key, value in values.items() if value is not None}


def apply_cli_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    """Return `config` with any CLI flags that were given applied on top."""

    pull = replace(
        config.pull,
        **_overrides(
            limit=args.limit,
            max_per_source=args.max_per_source,
            since_hours=args.since_hours,
            timeout_seconds=args.timeout,
        ),
    )
    enrichment = replace(
        config.enrichment,
        **_overrides(
            concurrency=args.concurrency,
            topic_concurrency=args.concurrency,
            batch_limit=args.batch_limit,
        ),
    )
    return replace(config, pull=pull, enrichment=enrichment)
