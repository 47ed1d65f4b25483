"""Bounded-concurrency enrichment stages over stored articles."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any, Callable, Optional

from classify_articles.classify_articles import classify_article
from common.config import ContentConfig, PersistenceConfig
from common.errors import ContentExtractionError, SchemaDriftError
from common.utils import get_value
from enrich_articles.models import BatchResult
from extract_content.extract_content import extract_content
from extract_topics.extract_topics import extract_topics, to_extraction_input
from ingest_articles.fetch_articles.sources import SourceRegistry, default_registry
from persistence.articles import ArticleStore, SchemaCapabilities
from persistence.connection import get_session
from persistence.queries import (
    get_articles_missing_tags,
    get_articles_missing_topics,
    get_articles_needing_content,
)
from persistence.topics import persist_article_topics

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5

STAGE_CONTENT = "content"
STAGE_CLASSIFY = "classify"
STAGE_TOPICS = "topics"

# Zero-argument callable returning a session context manager
SessionFactory = Callable[[], Any]


def _item_id(item: Any) -> str:
    return str(get_value(item, "id") or "unknown")


def run_with_concurrency(
    items: list[Any],
    concurrency: int,
    task: Callable[[Any], Any],
    stage: str = "batch",
    item_id: Callable[[Any], str] = _item_id,
) -> BatchResult:
    """
    Run `task` over `items` with at most `concurrency` workers.

    A failing item is counted and sampled; it never stops the batch.
    """
    result = BatchResult(stage=stage, processed=len(items))
    if not items:
        return result

    workers = max(1, min(concurrency, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(task, item): item for item in items}
        for future in as_completed(futures):
            item = futures[future]
            try:
                future.result()
            except Exception as e:
                logger.warning("%s failed for %s: %s", stage, item_id(item), e)
                result.record_failure(item_id(item), str(e))
            else:
                result.succeeded += 1

    logger.info(
        "%s stage: %d processed, %d succeeded, %d failed",
        stage,
        result.processed,
        result.succeeded,
        result.failed,
    )
    return result


def _store(
    session,
    persistence: Optional[PersistenceConfig],
    capabilities: Optional[SchemaCapabilities],
) -> ArticleStore:
    persistence = persistence or PersistenceConfig()
    return ArticleStore(
        session,
        chunk_size=persistence.chunk_size,
        max_attempts=persistence.max_attempts,
        backoff_seconds=persistence.backoff_seconds,
        capabilities=capabilities,
    )


def enrich_content(
    articles: list[Any],
    session_factory: SessionFactory = get_session,
    concurrency: int = DEFAULT_CONCURRENCY,
    content: Optional[ContentConfig] = None,
    persistence: Optional[PersistenceConfig] = None,
) -> BatchResult:
    """Fetch and store article bodies. Failed extractions are stored, then counted as failures."""
    content = content or ContentConfig()

    def _task(article) -> None:
        url = get_value(article, "article_url") or get_value(article, "canonical_url")
        extracted = extract_content(url, timeout=content.timeout_seconds, user_agent=content.user_agent)
        with session_factory() as session:
            _store(session, persistence, None).update_content(get_value(article, "id"), extracted)
        if not extracted.is_fetched:
            raise ContentExtractionError(extracted.error or "content extraction failed")

    return run_with_concurrency(articles, concurrency, _task, stage=STAGE_CONTENT)


def enrich_tags(
    articles: list[Any],
    session_factory: SessionFactory = get_session,
    concurrency: int = DEFAULT_CONCURRENCY,
    persistence: Optional[PersistenceConfig] = None,
    capabilities: Optional[SchemaCapabilities] = None,
) -> BatchResult:
    capabilities = capabilities or SchemaCapabilities()

    def _task(article) -> None:
        tags = classify_article(article)
        with session_factory() as session:
            if not _store(session, persistence, capabilities).update_tags(get_value(article, "id"), tags):
                raise SchemaDriftError("update article tags", "tag columns are not available")

    return run_with_concurrency(articles, concurrency, _task, stage=STAGE_CLASSIFY)


def enrich_topics(
    articles: list[Any],
    session_factory: SessionFactory = get_session,
    concurrency: int = DEFAULT_CONCURRENCY,
    registry: Optional[SourceRegistry] = None,
    persistence: Optional[PersistenceConfig] = None,
) -> BatchResult:
    registry = registry or default_registry()
    persistence = persistence or PersistenceConfig()

    def _task(article) -> None:
        topics = extract_topics(to_extraction_input(article), registry)
        with session_factory() as session:
            persist_article_topics(
                session,
                get_value(article, "id"),
                topics,
                attempts=persistence.max_attempts,
                backoff_seconds=persistence.backoff_seconds,
            )

    return run_with_concurrency(articles, concurrency, _task, stage=STAGE_TOPICS)


def run_content_batch(
    session_factory: SessionFactory = get_session,
    limit: Optional[int] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    since: Optional[datetime] = None,
    content: Optional[ContentConfig] = None,
    persistence: Optional[PersistenceConfig] = None,
) -> BatchResult:
    with session_factory() as session:
        articles = get_articles_needing_content(session, limit=limit, since=since)
    logger.info("Found %d articles needing content", len(articles))
    return enrich_content(articles, session_factory, concurrency, content, persistence)


def run_classification_batch(
    session_factory: SessionFactory = get_session,
    limit: Optional[int] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    persistence: Optional[PersistenceConfig] = None,
) -> BatchResult:
    try:
        with session_factory() as session:
            articles = get_articles_missing_tags(session, limit=limit)
    except SchemaDriftError as e:
        logger.warning("Skipping classification, tag columns are not available: %s", e)
        return BatchResult(stage=STAGE_CLASSIFY)
    logger.info("Found %d articles missing tags", len(articles))
    return enrich_tags(articles, session_factory, concurrency, persistence)


def run_topic_batch(
    session_factory: SessionFactory = get_session,
    limit: Optional[int] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    since: Optional[datetime] = None,
    registry: Optional[SourceRegistry] = None,
    persistence: Optional[PersistenceConfig] = None,
) -> BatchResult:
    with session_factory() as session:
        articles = get_articles_missing_topics(session, limit=limit, since=since)
    logger.info("Found %d articles missing topics", len(articles))
    return enrich_topics(articles, session_factory, concurrency, registry, persistence)
