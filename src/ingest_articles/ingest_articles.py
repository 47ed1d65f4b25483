"""Pull, deduplicate and rank articles from the defense feed registry."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from common.datetime import utc_now
from common.utils import clamp
from ingest_articles.dedupe import dedupe_and_rank
from ingest_articles.fetch_articles.fetch_articles import fetch_articles
from ingest_articles.fetch_articles.sources import SourceRegistry, default_registry
from ingest_articles.models import PullOptions, PullResult

logger = logging.getLogger(__name__)


def build_pull_options(
    max_per_source: Optional[int] = None,
    limit: Optional[int] = None,
    since_hours: Optional[int] = None,
    timeout_seconds: Optional[float] = None,
    max_workers: Optional[int] = None,
    user_agent: Optional[str] = None,
) -> PullOptions:
    """Build run options, substituting defaults and clamping each value to its allowed range."""
    defaults = PullOptions()
    return PullOptions(
        max_per_source=int(clamp(max_per_source if max_per_source is not None else defaults.max_per_source, 1, 100)),
        limit=int(clamp(limit if limit is not None else defaults.limit, 1, 1000)),
        since_hours=int(clamp(since_hours if since_hours is not None else defaults.since_hours, 1, 24 * 90)),
        timeout_seconds=float(
            clamp(timeout_seconds if timeout_seconds is not None else defaults.timeout_seconds, 1.5, 90)
        ),
        max_workers=max(1, max_workers if max_workers is not None else defaults.max_workers),
        user_agent=user_agent or defaults.user_agent,
    )


def ingest_articles(
    source_ids: Optional[Iterable[str]] = None,
    options: Optional[PullOptions] = None,
    registry: Optional[SourceRegistry] = None,
    now: Optional[datetime] = None,
) -> PullResult:
    """Pull every selected source and return deduplicated, ranked items.

    Source failures are collected in `PullResult.errors` and never raised.
    """
    registry = registry or default_registry()
    options = options or build_pull_options()
    sources = registry.resolve(source_ids)

    logger.info("Ingesting articles from %d sources", len(sources))

    pulled, errors = fetch_articles(sources, options)
    articles = dedupe_and_rank(
        pulled,
        limit=options.limit,
        since_hours=options.since_hours,
        registry=registry,
        now=now,
    )

    if not articles:
        logger.warning("0 Articles ingested")
    else:
        logger.info("%d Articles ingested from %d sources", len(articles), len(sources))

    return PullResult(
        fetched_at=now or utc_now(),
        source_count=len(sources),
        articles=articles,
        errors=errors,
    )
