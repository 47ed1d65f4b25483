"""Fan out feed fetches across sources and settle every result."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from common.errors import PipelineError
from ingest_articles.fetch_articles.fetch_rss_articles import fetch_rss_articles
from ingest_articles.models import FeedSource, PulledItem, PullError, PullOptions

logger = logging.getLogger(__name__)


def fetch_articles(
    sources: list[FeedSource],
    options: PullOptions,
) -> tuple[list[PulledItem], list[PullError]]:
    """Fetch every source in parallel.

    A failing source never affects the others: its error is recorded and the
    remaining sources are still collected. Items come back grouped in source
    order regardless of completion order.
    """
    if not sources:
        return [], []

    results: dict[str, list[PulledItem]] = {}
    errors: dict[str, PullError] = {}
    workers = max(1, min(options.max_workers, len(sources)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fetch_rss_articles, source, options): source
            for source in sources
        }
        for future in as_completed(futures):
            source = futures[future]
            try:
                items = future.result()
            except PipelineError as e:
                logger.error("Failed to fetch %s: %s", source.id, e)
                errors[source.id] = PullError(source.id, source.name, str(e))
                continue
            except Exception as e:
                logger.exception("Unexpected error fetching %s", source.id)
                errors[source.id] = PullError(source.id, source.name, str(e) or "Unknown ingestion error")
                continue

            logger.info("Found %d articles from %s", len(items), source.id)
            results[source.id] = items

    articles = [item for source in sources for item in results.get(source.id, [])]
    ordered_errors = [errors[source.id] for source in sources if source.id in errors]

    logger.info(
        "Total articles collected: %d from %d sources (%d failed)",
        len(articles),
        len(sources) - len(ordered_errors),
        len(ordered_errors),
    )
    return articles, ordered_errors
