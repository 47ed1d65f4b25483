"""CLI for running the full ingest pipeline."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from enrich_articles.helpers import apply_cli_overrides, parse_run_pipeline_args
from enrich_articles.run_pipeline import run_pipeline
from ingest_articles.fetch_articles.sources import default_registry
from ingest_articles.helpers import parse_sources

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_run_pipeline_args()
    config = apply_cli_overrides(load_config(args.config), args)
    registry = default_registry()

    source_ids = parse_sources(args.sources, registry)
    summary = run_pipeline(
        config,
        source_ids=source_ids or None,
        registry=registry,
        cleanup_orphans=args.cleanup_orphans,
    )

    for error in summary["pull_errors"]:
        logger.error("  %s | %s", error["source_id"], error["message"])

    if args.load_local:
        save_jsonl_records_local([summary], "pipeline_summary")


if __name__ == "__main__":
    main()
