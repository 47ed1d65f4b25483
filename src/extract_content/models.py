"""Data models for extract_content pipeline stage."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

STATUS_FETCHED = "fetched"
STATUS_FAILED = "failed"


@dataclass
class ExtractedContent:
    """Article body, excerpt and lead image pulled from an article page."""
    status: str
    fetched_at: datetime
    full_text: Optional[str] = None
    excerpt: Optional[str] = None
    lead_image_url: Optional[str] = None
    word_count: int = 0
    reading_minutes: int = 0
    error: Optional[str] = None

    @property
    def is_fetched(self) -> bool:
        return self.status == STATUS_FETCHED


@dataclass
class ArticleContent:
    """Extraction result for one article row."""
    article_id: str
    url: str
    content: ExtractedContent
