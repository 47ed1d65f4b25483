"""Deduplicate, rank and filter pulled items."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from common.datetime import epoch_ms, utc_now
from common.utils import collapse_whitespace
from ingest_articles.fetch_articles.sources import SourceRegistry
from ingest_articles.models import PulledItem

logger = logging.getLogger(__name__)

SUMMARY_RANK_CAP = 320


def dedup_key(item: PulledItem) -> str:
    """Identity of an item: its canonical URL, else its normalized title and publish day."""
    if item.url:
        return f"url:{item.url.lower()}"
    title = collapse_whitespace(item.title.lower())
    day = item.published_at.date().isoformat() if item.published_at else "unknown-day"
    return f"title:{title}:{day}"


def rank_score(item: PulledItem, registry: Optional[SourceRegistry] = None) -> int:
    """Source weight dominates; recency and richer summaries break ties."""
    source = registry.get(item.source_id) if registry else None
    weight = source.weight if source else item.source_weight
    return weight * 1000 + epoch_ms(item.published_at) + min(len(item.summary), SUMMARY_RANK_CAP)


def dedupe(items: list[PulledItem], registry: Optional[SourceRegistry] = None) -> list[PulledItem]:
    """Keep the highest-ranked item per dedup key, in first-seen key order."""
    best: dict[str, PulledItem] = {}
    for item in items:
        key = dedup_key(item)
        existing = best.get(key)
        if existing is None or rank_score(item, registry) > rank_score(existing, registry):
            best[key] = item
    return list(best.values())


def filter_recent(
    items: list[PulledItem],
    since_hours: int,
    now: Optional[datetime] = None,
) -> list[PulledItem]:
    """Drop items published before the window. Undated items are always kept."""
    cutoff = (now or utc_now()) - timedelta(hours=since_hours)
    cutoff_ms = epoch_ms(cutoff)
    return [
        item for item in items
        if item.published_at is None or epoch_ms(item.published_at) >= cutoff_ms
    ]


def dedupe_and_rank(
    items: list[PulledItem],
    limit: int,
    since_hours: int,
    registry: Optional[SourceRegistry] = None,
    now: Optional[datetime] = None,
) -> list[PulledItem]:
    """Recency filter, dedup by best rank, then newest first truncated to `limit`."""
    recent = filter_recent(items, since_hours, now)
    deduped = dedupe(recent, registry)
    ordered = sorted(deduped, key=lambda item: epoch_ms(item.published_at), reverse=True)

    logger.info(
        "Kept %d of %d items (%d after recency filter, limit %d)",
        min(len(ordered), limit),
        len(items),
        len(recent),
        limit,
    )
    return ordered[:limit]
