"""Data models for classify_articles pipeline stage."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class KeywordRule:
    label: str
    keywords: tuple[str, ...]


@dataclass
class ArticleTags:
    """Mission/domain/technology tags plus content type and briefing track."""
    mission_tags: list[str] = field(default_factory=list)
    domain_tags: list[str] = field(default_factory=list)
    technology_tags: list[str] = field(default_factory=list)
    track: str = "programs"
    content_type: str = "program"
    high_impact: bool = False


@dataclass
class ClassifiedArticle:
    """Article id with its classified tags."""
    article_id: str
    tags: ArticleTags
