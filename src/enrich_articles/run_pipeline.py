"""End-to-end run: pull, persist, fetch content, extract topics."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from common.config import PipelineConfig
from common.serialization import serialize_dataclass
from enrich_articles.orchestrator import SessionFactory, run_content_batch, run_topic_batch
from ingest_articles.fetch_articles.sources import SourceRegistry, default_registry
from ingest_articles.ingest_articles import build_pull_options, ingest_articles
from persistence.articles import ArticleStore
from persistence.connection import get_session
from persistence.topics import cleanup_orphan_topics

logger = logging.getLogger(__name__)


def run_pipeline(
    config: Optional[PipelineConfig] = None,
    source_ids: Optional[Iterable[str]] = None,
    session_factory: SessionFactory = get_session,
    registry: Optional[SourceRegistry] = None,
    cleanup_orphans: bool = False,
    now: Optional[datetime] = None,
) -> dict:
    """
    Run one full ingest cycle and return a summary of every stage.

    Content and topic stages only touch rows written by this run.
    """
    config = config or PipelineConfig()
    registry = registry or default_registry()
    pull = config.pull

    options = build_pull_options(
        max_per_source=pull.max_per_source,
        limit=pull.limit,
        since_hours=pull.since_hours,
        timeout_seconds=pull.timeout_seconds,
        max_workers=pull.max_workers,
        user_agent=pull.user_agent,
    )
    result = ingest_articles(source_ids or pull.source_ids or None, options, registry, now)

    with session_factory() as session:
        store = ArticleStore(
            session,
            chunk_size=config.persistence.chunk_size,
            max_attempts=config.persistence.max_attempts,
            backoff_seconds=config.persistence.backoff_seconds,
            registry=registry,
        )
        persisted = store.persist_pull_result(result)

    content = run_content_batch(
        session_factory,
        limit=config.enrichment.batch_limit,
        concurrency=config.enrichment.concurrency,
        since=result.fetched_at,
        content=config.content,
        persistence=config.persistence,
    )
    topics = run_topic_batch(
        session_factory,
        limit=config.enrichment.batch_limit,
        concurrency=config.enrichment.topic_concurrency,
        since=result.fetched_at,
        registry=registry,
        persistence=config.persistence,
    )

    orphans_removed = 0
    if cleanup_orphans:
        with session_factory() as session:
            orphans_removed = cleanup_orphan_topics(session)

    summary = {
        "fetched_at": result.fetched_at.isoformat(),
        "source_count": result.source_count,
        "article_count": result.article_count,
        "pull_errors": [serialize_dataclass(error) for error in result.errors],
        "persisted": serialize_dataclass(persisted),
        "content": serialize_dataclass(content),
        "topics": serialize_dataclass(topics),
        "orphan_topics_removed": orphans_removed,
    }
    logger.info(
        "Pipeline finished: %d articles, %d pull errors, content %d/%d, topics %d/%d",
        result.article_count,
        len(result.errors),
        content.succeeded,
        content.processed,
        topics.succeeded,
        topics.processed,
    )
    return summary
