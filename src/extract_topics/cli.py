"""CLI for extracting topics from stored articles."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from enrich_articles.orchestrator import enrich_topics
from extract_topics.extract_topics import extract_article_topics
from extract_topics.helpers import parse_extract_topics_args
from ingest_articles.fetch_articles.sources import default_registry
from persistence.connection import get_session
from persistence.queries import get_articles_missing_topics
from persistence.topics import cleanup_orphan_topics

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_extract_topics_args()
    config = load_config(args.config)
    registry = default_registry()

    with get_session() as session:
        articles = get_articles_missing_topics(session, limit=args.batch_limit or config.enrichment.batch_limit)

    if not articles:
        logger.warning("No articles missing topics")
    else:
        if args.load_local:
            results = extract_article_topics(articles, registry)
            for result in results:
                logger.info("  %s | %s", result.article_id, [topic.label for topic in result.topics])
            save_jsonl_records_local(results, "article_topics")

        if args.load_rds:
            batch = enrich_topics(
                articles,
                get_session,
                concurrency=args.concurrency or config.enrichment.topic_concurrency,
                registry=registry,
                persistence=config.persistence,
            )
            for error in batch.errors:
                logger.warning("  %s | %s", error.item_id, error.message)

    if args.cleanup_orphans:
        with get_session() as session:
            cleanup_orphan_topics(session)


if __name__ == "__main__":
    main()
