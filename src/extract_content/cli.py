"""CLI for extracting article bodies."""

from __future__ import annotations

import logging
from dataclasses import replace

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from enrich_articles.orchestrator import enrich_content
from extract_content.extract_content import extract_content
from extract_content.helpers import parse_extract_content_args
from extract_content.models import ArticleContent
from persistence.connection import get_session
from persistence.queries import get_articles_needing_content

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_extract_content_args()
    config = load_config(args.config)
    content_config = config.content
    if args.timeout is not None:
        content_config = replace(content_config, timeout_seconds=args.timeout)

    if args.url:
        content = extract_content(args.url, content_config.timeout_seconds, content_config.user_agent)
        logger.info(
            "%s | %s | words=%d | image=%s",
            args.url,
            content.status,
            content.word_count,
            content.lead_image_url,
        )
        if content.error:
            logger.warning("  %s", content.error)
        if args.load_local:
            record = ArticleContent(article_id="", url=args.url, content=content)
            save_jsonl_records_local([record], "article_content")
        return

    with get_session() as session:
        articles = get_articles_needing_content(session, limit=args.batch_limit or config.enrichment.batch_limit)

    if not articles:
        logger.warning("No articles need content")
        return

    if not args.load_rds:
        logger.info("Found %d articles needing content; pass --load-rds to fetch and store them", len(articles))
        return

    batch = enrich_content(
        articles,
        get_session,
        concurrency=args.concurrency or config.enrichment.concurrency,
        content=content_config,
        persistence=config.persistence,
    )
    for error in batch.errors:
        logger.warning("  %s | %s", error.item_id, error.message)

    if args.load_local:
        save_jsonl_records_local([batch], "content_batch")


if __name__ == "__main__":
    main()
