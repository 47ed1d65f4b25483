"""SQLAlchemy models for the ingest tables."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class NewsSource(Base):
    __tablename__ = "news_sources"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(32))
    source_badge: Mapped[str] = mapped_column(String(64))
    feed_url: Mapped[str] = mapped_column(Text)
    homepage_url: Mapped[str] = mapped_column(Text)
    weight: Mapped[int] = mapped_column(Integer)
    last_ingested_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class IngestedArticle(Base):
    __tablename__ = "ingested_articles"

    id: Mapped[str] = mapped_column(String(16), primary_key=True)
    canonical_url: Mapped[str] = mapped_column(Text, unique=True)
    article_url: Mapped[str] = mapped_column(Text)
    source_id: Mapped[str] = mapped_column(String(64), index=True)
    source_name: Mapped[str] = mapped_column(String(255))
    source_category: Mapped[str] = mapped_column(String(32))
    source_badge: Mapped[str] = mapped_column(String(64))
    title: Mapped[str] = mapped_column(Text)
    summary: Mapped[Optional[str]] = mapped_column(Text)
    author: Mapped[Optional[str]] = mapped_column(Text)
    guid: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    # Tag columns; older deployments do not have these
    mission_tags: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True))
    domain_tags: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True))
    technology_tags: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True))
    track: Mapped[Optional[str]] = mapped_column(String(32))
    content_type: Mapped[Optional[str]] = mapped_column(String(32))
    high_impact: Mapped[Optional[bool]] = mapped_column(Boolean)

    full_text: Mapped[Optional[str]] = mapped_column(Text)
    full_text_excerpt: Mapped[Optional[str]] = mapped_column(Text)
    lead_image_url: Mapped[Optional[str]] = mapped_column(Text)
    word_count: Mapped[Optional[int]] = mapped_column(Integer)
    reading_minutes: Mapped[Optional[int]] = mapped_column(Integer)
    content_fetch_status: Mapped[Optional[str]] = mapped_column(String(16))
    content_fetch_error: Mapped[Optional[str]] = mapped_column(Text)
    content_fetched_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class Topic(Base):
    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(96), unique=True)
    label: Mapped[str] = mapped_column(String(255))
    topic_type: Mapped[str] = mapped_column(String(32))


class ArticleTopic(Base):
    __tablename__ = "article_topics"

    article_id: Mapped[str] = mapped_column(
        String(16), ForeignKey("ingested_articles.id", ondelete="CASCADE"), primary_key=True
    )
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.id", ondelete="CASCADE"), primary_key=True)
    confidence: Mapped[float] = mapped_column(Float)
    occurrences: Mapped[int] = mapped_column(Integer)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)


TAG_COLUMNS = (
    "mission_tags",
    "domain_tags",
    "technology_tags",
    "track",
    "content_type",
    "high_impact",
)
