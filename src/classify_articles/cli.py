"""CLI for tagging articles with mission, domain and technology labels."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from classify_articles.classify_articles import classify_articles
from classify_articles.helpers import parse_classify_articles_args
from common.cli_helpers import setup_logging
from common.config import load_config
from common.errors import SchemaDriftError
from common.local_io import save_jsonl_records_local
from enrich_articles.orchestrator import enrich_tags
from persistence.connection import get_session
from persistence.queries import get_articles_missing_tags

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_classify_articles_args()
    config = load_config(args.config)
    limit = args.batch_limit or config.enrichment.batch_limit

    try:
        with get_session() as session:
            articles = get_articles_missing_tags(session, limit=limit)
    except SchemaDriftError as e:
        logger.warning("Tag columns are not available, nothing to classify: %s", e)
        return

    if not articles:
        logger.warning("No articles to classify")
        return

    results = classify_articles(articles)

    titles_by_id = {a.id: a.title for a in articles}
    for result in results:
        logger.info(
            "  %s | %s | %s | missions=%s",
            result.article_id,
            titles_by_id.get(result.article_id, "untitled"),
            result.tags.content_type,
            result.tags.mission_tags,
        )

    if args.load_local:
        save_jsonl_records_local(results, "classified_articles")

    if args.load_rds:
        batch = enrich_tags(
            articles,
            get_session,
            concurrency=args.concurrency or config.enrichment.concurrency,
            persistence=config.persistence,
        )
        logger.info("Stored tags for %d/%d articles", batch.succeeded, batch.processed)


if __name__ == "__main__":
    main()
