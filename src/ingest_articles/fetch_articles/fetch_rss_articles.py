"""Fetch one RSS/Atom feed and normalize its entries."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import feedparser
import requests

from common.datetime import epoch_ms, parse_timestamp
from common.errors import FeedParseError, SourceFetchError
from common.utils import get_value
from ingest_articles.clean_articles.clean import (
    canonicalize_url,
    normalize_image_url,
    strip_html,
    truncate_summary,
)
from ingest_articles.fetch_articles.sources import per_source_cap
from ingest_articles.models import FeedSource, PulledItem, PullOptions

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml;q=0.9, */*;q=0.5"

TEXT_KEYS = ("value", "#text", "text", "name", "href")
DATE_KEYS = ("published", "pubdate", "dc_date", "updated", "created")

_IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_IMG_SRC_RE = re.compile(r"""\b(?:src|data-src|data-original)\s*=\s*(['"])(.*?)\1""", re.IGNORECASE)
_IMG_SRCSET_RE = re.compile(r"""\bsrcset\s*=\s*(['"])(.*?)\1""", re.IGNORECASE)


def read_text(value: Any) -> str:
    """Resolve text from a loosely typed feed node (string, mapping or list)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, bool)):
        return str(value)
    if isinstance(value, (list, tuple)):
        for item in value:
            text = read_text(item)
            if text:
                return text
        return ""
    if isinstance(value, dict):
        for key in TEXT_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
    return ""


def first_text(entry: Any, *keys: str) -> str:
    """First non-empty text among the given entry fields."""
    for key in keys:
        text = read_text(get_value(entry, key))
        if text:
            return text
    return ""


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _extract_link(entry: Any) -> str:
    link = canonicalize_url(read_text(get_value(entry, "link")))
    if link:
        return link

    fallback = ""
    for raw in _as_list(get_value(entry, "links")):
        href = canonicalize_url(read_text(get_value(raw, "href")) if isinstance(raw, dict) else read_text(raw))
        if not href:
            continue
        rel = read_text(get_value(raw, "rel")).lower() if isinstance(raw, dict) else ""
        if not rel or rel == "alternate":
            return href
        if not fallback and rel not in ("enclosure", "image", "preview"):
            fallback = href
    if fallback:
        return fallback

    # Some feeds only carry the permalink in the guid
    for key in ("guid", "id"):
        guid = read_text(get_value(entry, key))
        if guid.lower().startswith(("http://", "https://")):
            return canonicalize_url(guid)
    return ""


def _is_image_attachment(node: dict) -> bool:
    medium = read_text(node.get("medium")).lower()
    if medium and medium != "image":
        return False
    content_type = read_text(node.get("type")).lower()
    if content_type and not content_type.startswith("image/"):
        return False
    return True


def _image_from_nodes(value: Any, article_url: str) -> str:
    for node in _as_list(value):
        if not isinstance(node, dict):
            direct = normalize_image_url(read_text(node), article_url)
            if direct:
                return direct
            continue
        if not _is_image_attachment(node):
            continue
        for key in ("url", "href", "src"):
            image = normalize_image_url(read_text(node.get(key)), article_url)
            if image:
                return image
    return ""


def _image_from_links(value: Any, article_url: str) -> str:
    for node in _as_list(value):
        if not isinstance(node, dict):
            continue
        rel = read_text(node.get("rel")).lower()
        content_type = read_text(node.get("type")).lower()
        if not content_type.startswith("image/") and rel not in ("enclosure", "image", "preview"):
            continue
        if rel == "enclosure" and content_type and not content_type.startswith("image/"):
            continue
        image = normalize_image_url(read_text(node.get("href")), article_url)
        if image:
            return image
    return ""


def _image_from_html(value: Any, article_url: str) -> str:
    text = read_text(value)
    if not text:
        return ""
    tag_match = _IMG_TAG_RE.search(text)
    if not tag_match:
        return ""
    tag = tag_match.group(0)

    src_match = _IMG_SRC_RE.search(tag)
    if src_match and src_match.group(2):
        image = normalize_image_url(src_match.group(2), article_url)
        if image:
            return image

    srcset_match = _IMG_SRCSET_RE.search(tag)
    if srcset_match:
        for part in srcset_match.group(2).split(","):
            src = part.strip().split()
            if src:
                return normalize_image_url(src[0], article_url)
    return ""


def _extract_image(entry: Any, article_url: str) -> Optional[str]:
    candidates = (
        lambda: _image_from_nodes(get_value(entry, "media_content"), article_url),
        lambda: _image_from_nodes(get_value(entry, "media_thumbnail"), article_url),
        lambda: _image_from_nodes(get_value(entry, "enclosures"), article_url),
        lambda: _image_from_links(get_value(entry, "links"), article_url),
        lambda: _image_from_html(get_value(entry, "content"), article_url),
        lambda: _image_from_html(get_value(entry, "summary"), article_url),
        lambda: _image_from_html(get_value(entry, "description"), article_url),
    )
    for candidate in candidates:
        image = candidate()
        if image:
            return image
    return None


def _extract_published(entry: Any):
    for key in DATE_KEYS:
        published = parse_timestamp(read_text(get_value(entry, key)))
        if published:
            return published
    return None


def _extract_author(entry: Any) -> Optional[str]:
    author = strip_html(first_text(entry, "author", "author_detail", "dc_creator"))
    return author or None


def parse_entry(source: FeedSource, entry: Any) -> Optional[PulledItem]:
    """Normalize a single feed entry. Entries without a title or link are dropped."""
    title = strip_html(first_text(entry, "title"))
    url = _extract_link(entry)
    if not title or not url:
        return None

    summary = strip_html(first_text(entry, "summary", "description")) or strip_html(
        first_text(entry, "content")
    )

    return PulledItem(
        source_id=source.id,
        source_name=source.name,
        source_category=source.category,
        source_badge=source.source_badge,
        source_weight=source.weight,
        title=title,
        url=url,
        summary=truncate_summary(summary),
        published_at=_extract_published(entry),
        author=_extract_author(entry),
        guid=first_text(entry, "guid", "id") or None,
        image_url=_extract_image(entry, url),
    )


def parse_feed(source: FeedSource, content: bytes | str) -> list[PulledItem]:
    """Parse an RSS or Atom body into pulled items.

    Raises:
        FeedParseError: If the body is not a recognizable feed.
    """
    parsed = feedparser.parse(content)
    version = parsed.get("version") or ""
    entries = parsed.get("entries") or []

    if not version.startswith(("rss", "atom")):
        if parsed.get("bozo") and not entries:
            reason = parsed.get("bozo_exception")
            raise FeedParseError(source.id, f"Malformed feed: {reason}")
        raise FeedParseError(source.id, "Unrecognized feed format")

    items = []
    for entry in entries:
        item = parse_entry(source, entry)
        if item is not None:
            items.append(item)

    if len(items) < len(entries):
        logger.debug("Dropped %d entries without title or link from %s", len(entries) - len(items), source.id)
    return items


def fetch_feed(source: FeedSource, timeout: float, user_agent: str) -> bytes:
    """Download a feed body.

    Raises:
        SourceFetchError: On timeouts, transport errors and non-2xx responses.
    """
    try:
        response = requests.get(
            source.feed_url,
            timeout=timeout,
            headers={"Accept": FEED_ACCEPT, "User-Agent": user_agent},
        )
        response.raise_for_status()
    except requests.Timeout as exc:
        raise SourceFetchError(source.id, f"Feed request timed out after {timeout:g}s") from exc
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "unknown"
        raise SourceFetchError(source.id, f"Feed request failed with status {status}") from exc
    except requests.RequestException as exc:
        raise SourceFetchError(source.id, f"Feed request failed: {exc}") from exc
    return response.content


def sort_by_published(items: list[PulledItem]) -> list[PulledItem]:
    """Newest first; undated items keep their order at the end."""
    return sorted(items, key=lambda item: epoch_ms(item.published_at), reverse=True)


def fetch_rss_articles(source: FeedSource, options: PullOptions) -> list[PulledItem]:
    """Fetch, parse and cap the newest items of a single source."""
    content = fetch_feed(source, options.timeout_seconds, options.user_agent)
    items = parse_feed(source, content)
    cap = per_source_cap(source, options.max_per_source)
    return sort_by_published(items)[:cap]
