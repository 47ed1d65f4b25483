"""CLI for pulling articles from the defense feed registry."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from ingest_articles.fetch_articles.sources import default_registry
from ingest_articles.helpers import parse_ingest_articles_args, parse_sources, resolve_pull_options
from ingest_articles.ingest_articles import ingest_articles
from persistence.articles import ArticleStore
from persistence.connection import get_session

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_ingest_articles_args()
    config = load_config(args.config)
    registry = default_registry()

    source_ids = parse_sources(args.sources, registry) or list(config.pull.source_ids)
    options = resolve_pull_options(args, config.pull)

    result = ingest_articles(source_ids or None, options, registry)

    for error in result.errors:
        logger.error("  %s | %s", error.source_id, error.message)

    if not result.articles:
        logger.warning("No articles pulled")
        return

    if args.load_local:
        save_jsonl_records_local(result.articles, "pulled_articles")

    if args.load_rds:
        with get_session() as session:
            store = ArticleStore(
                session,
                chunk_size=config.persistence.chunk_size,
                max_attempts=config.persistence.max_attempts,
                backoff_seconds=config.persistence.backoff_seconds,
                registry=registry,
            )
            persisted = store.persist_pull_result(result)
        logger.info(
            "Loaded %d articles and %d sources%s",
            persisted.upserted_article_count,
            persisted.upserted_source_count,
            " using the legacy schema" if persisted.used_legacy_schema else "",
        )


if __name__ == "__main__":
    main()
