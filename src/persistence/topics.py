"""Persist extracted topics and their article links."""

from __future__ import annotations

import logging
import time
from typing import Callable

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.orm import Session

from extract_topics.models import TopicCandidate
from extract_topics.taxonomy import TAXONOMY_SLUGS
from persistence.errors import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF_SECONDS, run_with_retry
from persistence.models import ArticleTopic, Topic
from persistence.upsert import build_upsert

logger = logging.getLogger(__name__)

MAX_STORED_CONFIDENCE = 0.999


def _taxonomy_candidates(candidates: list[TopicCandidate]) -> list[TopicCandidate]:
    kept: dict[str, TopicCandidate] = {}
    for candidate in candidates:
        if candidate.slug in TAXONOMY_SLUGS and candidate.slug not in kept:
            kept[candidate.slug] = candidate
    return list(kept.values())


def build_link_row(article_id: str, topic_id: int, candidate: TopicCandidate) -> dict:
    return {
        "article_id": article_id,
        "topic_id": topic_id,
        "confidence": min(MAX_STORED_CONFIDENCE, round(candidate.confidence, 3)),
        "occurrences": max(1, candidate.occurrences),
        "is_primary": candidate.is_primary,
    }


def persist_article_topics(
    session: Session,
    article_id: str,
    candidates: list[TopicCandidate],
    attempts: int = DEFAULT_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Replace an article's topic links with `candidates`.

    Only taxonomy topics are stored. Topics are upserted by slug and the
    whole refresh commits as one unit. Returns the number of links written.
    """
    candidates = _taxonomy_candidates(candidates)

    def _refresh() -> int:
        session.execute(delete(ArticleTopic).where(ArticleTopic.article_id == article_id))
        if not candidates:
            session.commit()
            return 0

        topic_rows = [
            {"slug": c.slug, "label": c.label, "topic_type": c.topic_type} for c in candidates
        ]
        session.execute(build_upsert(session, Topic, topic_rows, ["slug"]))

        slugs = [c.slug for c in candidates]
        topic_ids = dict(session.execute(select(Topic.slug, Topic.id).where(Topic.slug.in_(slugs))).all())

        links = [
            build_link_row(article_id, topic_ids[c.slug], c) for c in candidates if c.slug in topic_ids
        ]
        if links:
            session.execute(insert(ArticleTopic).values(links))
        session.commit()
        return len(links)

    return run_with_retry(
        "refresh article topics",
        _refresh,
        session=session,
        attempts=attempts,
        backoff_seconds=backoff_seconds,
        sleep=sleep,
    )


def cleanup_orphan_topics(session: Session) -> int:
    """Delete topics with no article links or outside the taxonomy. Returns the count removed."""
    taxonomy_slugs = sorted(TAXONOMY_SLUGS)
    stale_topic_ids = select(Topic.id).where(Topic.slug.not_in(taxonomy_slugs))

    def _cleanup() -> int:
        session.execute(
            delete(ArticleTopic).where(ArticleTopic.topic_id.in_(stale_topic_ids)),
            execution_options={"synchronize_session": False},
        )
        result = session.execute(
            delete(Topic).where(
                or_(
                    Topic.id.not_in(select(ArticleTopic.topic_id)),
                    Topic.slug.not_in(taxonomy_slugs),
                )
            ),
            execution_options={"synchronize_session": False},
        )
        session.commit()
        return result.rowcount or 0

    removed = run_with_retry("cleanup orphan topics", _cleanup, session=session)
    logger.info("Removed %d orphan topics", removed)
    return removed
