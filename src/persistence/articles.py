"""Persist pulled articles, their tags and extracted content."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from classify_articles.classify_articles import classify_article
from classify_articles.models import ArticleTags
from common.errors import SchemaDriftError
from common.hashing import generate_article_id
from common.utils import chunked
from extract_content.models import ExtractedContent
from ingest_articles.clean_articles.clean import canonicalize_url
from ingest_articles.fetch_articles.sources import SourceRegistry, default_registry
from ingest_articles.models import PulledItem, PullResult
from persistence.errors import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF_SECONDS, run_with_retry
from persistence.models import TAG_COLUMNS, IngestedArticle, NewsSource
from persistence.upsert import build_upsert

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 300


@dataclass
class PersistResult:
    upserted_source_count: int
    upserted_article_count: int
    used_legacy_schema: bool


def build_source_row(source, fetched_at: datetime) -> dict:
    return {
        "id": source.id,
        "name": source.name,
        "category": source.category,
        "source_badge": source.source_badge,
        "feed_url": source.feed_url,
        "homepage_url": source.homepage_url,
        "weight": source.weight,
        "last_ingested_at": fetched_at,
    }


def build_article_row(item: PulledItem, fetched_at: datetime, tags: Optional[ArticleTags] = None) -> dict:
    """Full row for an article; the id derives from the canonical URL."""
    canonical_url = canonicalize_url(item.url)
    row = {
        "id": generate_article_id(canonical_url),
        "canonical_url": canonical_url,
        "article_url": item.url,
        "source_id": item.source_id,
        "source_name": item.source_name,
        "source_category": item.source_category,
        "source_badge": item.source_badge,
        "title": item.title,
        "summary": item.summary,
        "author": item.author,
        "guid": item.guid,
        "image_url": item.image_url,
        "published_at": item.published_at,
        "fetched_at": fetched_at,
    }
    if tags is not None:
        row.update(tag_values(tags))
    return row


def tag_values(tags: ArticleTags) -> dict:
    return {
        "mission_tags": list(tags.mission_tags),
        "domain_tags": list(tags.domain_tags),
        "technology_tags": list(tags.technology_tags),
        "track": tags.track,
        "content_type": tags.content_type,
        "high_impact": tags.high_impact,
    }


def legacy_row(row: dict) -> dict:
    """The row without tag columns, for tables that predate them."""
    return {key: value for key, value in row.items() if key not in TAG_COLUMNS}


def _unique_by_canonical_url(rows: list[dict]) -> list[dict]:
    # ON CONFLICT cannot touch the same row twice in one statement
    seen: set[str] = set()
    unique = []
    for row in rows:
        if row["canonical_url"] in seen:
            continue
        seen.add(row["canonical_url"])
        unique.append(row)
    return unique


@dataclass
class SchemaCapabilities:
    """What the target schema supports, shared across stores in a process."""
    tag_columns: Optional[bool] = None


class ArticleStore:
    """
    Writes articles for one session.

    `supports_tag_columns` is None until the first article write. A schema
    drift error on the full row shape flips it to False and every later
    write uses the legacy shape.
    """

    def __init__(
        self,
        session: Session,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_attempts: int = DEFAULT_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        registry: Optional[SourceRegistry] = None,
        sleep: Callable[[float], None] = time.sleep,
        capabilities: Optional[SchemaCapabilities] = None,
    ):
        self.session = session
        self.chunk_size = max(1, chunk_size)
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.registry = registry or default_registry()
        self.sleep = sleep
        self.capabilities = capabilities or SchemaCapabilities()

    @property
    def supports_tag_columns(self) -> Optional[bool]:
        return self.capabilities.tag_columns

    @supports_tag_columns.setter
    def supports_tag_columns(self, value: Optional[bool]) -> None:
        self.capabilities.tag_columns = value

    def _execute(self, operation: str, stmt) -> None:
        def _write():
            self.session.execute(stmt)
            self.session.commit()

        run_with_retry(
            operation,
            _write,
            session=self.session,
            attempts=self.max_attempts,
            backoff_seconds=self.backoff_seconds,
            sleep=self.sleep,
        )

    def upsert_sources(self, source_ids: list[str], fetched_at: datetime) -> int:
        rows = []
        for source_id in dict.fromkeys(source_ids):
            source = self.registry.get(source_id)
            if source is None:
                logger.warning("Skipping unknown source %s", source_id)
                continue
            rows.append(build_source_row(source, fetched_at))

        if not rows:
            return 0
        self._execute("upsert sources", build_upsert(self.session, NewsSource, rows, ["id"]))
        return len(rows)

    def _upsert_article_rows(self, rows: list[dict]) -> None:
        stmt = build_upsert(self.session, IngestedArticle, rows, ["canonical_url"], exclude_from_update=["id"])
        self._execute("upsert articles", stmt)

    def _write_chunk(self, rows: list[dict]) -> None:
        if self.supports_tag_columns is False:
            self._upsert_article_rows([legacy_row(row) for row in rows])
            return

        try:
            self._upsert_article_rows(rows)
        except SchemaDriftError as e:
            logger.warning("Tag columns missing, falling back to legacy article rows: %s", e)
            self.supports_tag_columns = False
            self._upsert_article_rows([legacy_row(row) for row in rows])
            return
        self.supports_tag_columns = True

    def upsert_articles(self, rows: list[dict]) -> int:
        rows = _unique_by_canonical_url(rows)
        for chunk in chunked(rows, self.chunk_size):
            self._write_chunk(chunk)
        return len(rows)

    def persist_pull_result(
        self,
        result: PullResult,
        tags_by_url: Optional[dict[str, ArticleTags]] = None,
    ) -> PersistResult:
        """
        Upsert the sources that contributed articles, then the articles.

        Articles without precomputed tags are classified on the way in.
        """
        tags_by_url = tags_by_url or {}
        source_count = self.upsert_sources([item.source_id for item in result.articles], result.fetched_at)

        rows = [
            build_article_row(item, result.fetched_at, tags_by_url.get(item.url) or classify_article(item))
            for item in result.articles
        ]
        article_count = self.upsert_articles(rows)

        logger.info(
            "Persisted %d articles from %d sources%s",
            article_count,
            source_count,
            " (legacy schema)" if self.supports_tag_columns is False else "",
        )
        return PersistResult(
            upserted_source_count=source_count,
            upserted_article_count=article_count,
            used_legacy_schema=self.supports_tag_columns is False,
        )

    def update_content(self, article_id: str, content: ExtractedContent) -> None:
        values = {
            "content_fetch_status": content.status,
            "content_fetch_error": content.error,
            "content_fetched_at": content.fetched_at,
        }
        if content.is_fetched:
            values.update(
                full_text=content.full_text,
                full_text_excerpt=content.excerpt,
                lead_image_url=content.lead_image_url,
                word_count=content.word_count,
                reading_minutes=content.reading_minutes,
            )
        stmt = update(IngestedArticle).where(IngestedArticle.id == article_id).values(**values)
        self._execute("update article content", stmt)

    def update_tags(self, article_id: str, tags: ArticleTags) -> bool:
        """Write tags for one article. Returns False when the table has no tag columns."""
        if self.supports_tag_columns is False:
            return False

        stmt = update(IngestedArticle).where(IngestedArticle.id == article_id).values(**tag_values(tags))
        try:
            self._execute("update article tags", stmt)
        except SchemaDriftError as e:
            logger.warning("Tag columns missing, skipping tag updates: %s", e)
            self.supports_tag_columns = False
            return False
        self.supports_tag_columns = True
        return True
