"""Data models for ingest_articles pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FeedSource:
    """A configured RSS/Atom feed."""
    id: str
    name: str
    category: str
    source_badge: str
    feed_url: str
    homepage_url: str
    weight: int
    quality_tier: str
    cadence: str
    story_role: str
    topic_focus: tuple[str, ...] = ()


@dataclass
class PulledItem:
    """A feed entry normalized into article shape."""
    source_id: str
    source_name: str
    source_category: str
    source_badge: str
    source_weight: int
    title: str
    url: str
    summary: str
    published_at: Optional[datetime]
    author: Optional[str] = None
    guid: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class PullError:
    source_id: str
    source_name: str
    message: str


@dataclass
class PullResult:
    """Outcome of pulling every selected source."""
    fetched_at: datetime
    source_count: int
    articles: list[PulledItem] = field(default_factory=list)
    errors: list[PullError] = field(default_factory=list)

    @property
    def article_count(self) -> int:
        return len(self.articles)


@dataclass(frozen=True)
class PullOptions:
    """Run options for a pull, already clamped to their allowed ranges."""
    max_per_source: int = 30
    limit: int = 200
    since_hours: int = 168
    timeout_seconds: float = 15.0
    max_workers: int = 8
    user_agent: str = "DefenseNewsIngestBot/0.1 (+https://localhost)"
