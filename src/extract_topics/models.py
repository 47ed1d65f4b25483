"""Data models for extract_topics pipeline stage."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TaxonomyTopic:
    """A canonical topic. Context-gated aliases only match when the article has defense context."""
    label: str
    slug: str
    topic_type: str
    aliases: tuple[str, ...] = ()
    context_gated_aliases: tuple[str, ...] = ()


@dataclass
class TopicCandidate:
    """A topic found in an article."""
    slug: str
    label: str
    topic_type: str
    occurrences: int
    confidence: float
    is_primary: bool
    matched_by: str


@dataclass
class TopicExtractionInput:
    title: str
    summary: Optional[str] = None
    full_text: Optional[str] = None
    source_id: Optional[str] = None
    source_name: Optional[str] = None
    source_category: Optional[str] = None
    source_badge: Optional[str] = None


@dataclass
class ArticleTopics:
    """Topics extracted for one article."""
    article_id: str
    topics: list[TopicCandidate] = field(default_factory=list)
