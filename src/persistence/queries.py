"""Selection queries for the enrichment stages."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

from extract_content.models import STATUS_FETCHED
from persistence.errors import run_with_retry
from persistence.models import ArticleTopic, IngestedArticle

# Columns present in every schema version, tag columns excluded
ARTICLE_COLUMNS = (
    IngestedArticle.id,
    IngestedArticle.canonical_url,
    IngestedArticle.article_url,
    IngestedArticle.source_id,
    IngestedArticle.source_name,
    IngestedArticle.source_category,
    IngestedArticle.source_badge,
    IngestedArticle.title,
    IngestedArticle.summary,
    IngestedArticle.published_at,
    IngestedArticle.fetched_at,
    IngestedArticle.content_fetch_status,
)


def _newest_first(stmt, limit: Optional[int]):
    stmt = stmt.order_by(IngestedArticle.published_at.desc().nulls_last(), IngestedArticle.id)
    if limit:
        stmt = stmt.limit(limit)
    return stmt


def get_articles_needing_content(
    session: Session,
    limit: Optional[int] = None,
    since: Optional[datetime] = None,
) -> list:
    """Articles never fetched, or whose last content fetch did not succeed."""
    stmt = select(*ARTICLE_COLUMNS).where(
        or_(
            IngestedArticle.content_fetch_status.is_(None),
            IngestedArticle.content_fetch_status != STATUS_FETCHED,
        )
    )
    if since is not None:
        stmt = stmt.where(IngestedArticle.fetched_at >= since)
    return list(session.execute(_newest_first(stmt, limit)).all())


def get_articles_missing_topics(
    session: Session,
    limit: Optional[int] = None,
    since: Optional[datetime] = None,
) -> list:
    """Articles with fetched content and no topic links yet."""
    stmt = select(*ARTICLE_COLUMNS, IngestedArticle.full_text).where(
        IngestedArticle.content_fetch_status == STATUS_FETCHED,
        ~exists().where(ArticleTopic.article_id == IngestedArticle.id),
    )
    if since is not None:
        stmt = stmt.where(IngestedArticle.fetched_at >= since)
    return list(session.execute(_newest_first(stmt, limit)).all())


def get_articles_missing_tags(session: Session, limit: Optional[int] = None) -> list:
    """
    Articles that were never classified.

    Raises SchemaDriftError when the table has no tag columns.
    """
    stmt = _newest_first(select(*ARTICLE_COLUMNS).where(IngestedArticle.track.is_(None)), limit)
    return run_with_retry("select articles missing tags", lambda: list(session.execute(stmt).all()), session=session)
