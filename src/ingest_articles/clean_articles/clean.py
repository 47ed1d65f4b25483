"""Text and URL cleaning for feed entries."""

import html
import logging
import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 420

TRACKING_PARAMS = {
    "fbclid",
    "gclid",
    "mc_cid",
    "mc_eid",
    "mkt_tok",
    "igshid",
    "cmpid",
    "ocid",
    "ref",
    "spm",
}

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
# Entities html.unescape could not resolve, and one cut off at the end of the text
_LEFTOVER_ENTITY_RE = re.compile(r"&(?:[a-z]{2,12}|#x?[0-9a-f]{2,8});", re.IGNORECASE)
_TRAILING_ENTITY_RE = re.compile(r"&(?:[a-z]{2,12}|#x?[0-9a-f]{2,8})$", re.IGNORECASE)
_SVG_RE = re.compile(r"\.svg(?:[?#]|$)", re.IGNORECASE)


def strip_html(text: Optional[str]) -> str:
    """Strip script/style blocks and tags, decode entities, and collapse whitespace."""
    if not text:
        return ""
    text = _SCRIPT_STYLE_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    text = _LEFTOVER_ENTITY_RE.sub(" ", text)
    text = _TRAILING_ENTITY_RE.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def truncate_summary(text: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1].rstrip() + "…"


def _is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered.startswith("utm_") or lowered in TRACKING_PARAMS


def canonicalize_url(value: Optional[str]) -> str:
    """Drop the fragment and tracking query parameters from an absolute URL.

    Input that does not parse as an absolute URL is returned trimmed.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return ""

    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return trimmed
    if not parts.scheme or not parts.netloc:
        return trimmed

    query = parts.query
    params = parse_qsl(query, keep_blank_values=True)
    kept = [(key, val) for key, val in params if not _is_tracking_param(key)]
    if len(kept) != len(params):
        query = urlencode(kept)

    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, query, ""))


def resolve_url(value: Optional[str], base_url: str) -> str:
    """Resolve a possibly relative URL against `base_url`, rejecting data: and javascript: URLs."""
    trimmed = (value or "").strip()
    if not trimmed:
        return ""
    if trimmed.lower().startswith(("data:", "javascript:")):
        return ""
    try:
        resolved = urljoin(base_url, trimmed)
        parts = urlsplit(resolved)
    except ValueError:
        return ""
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return ""
    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))


def normalize_image_url(value: Optional[str], base_url: str) -> str:
    """Resolve an image URL, dropping SVGs."""
    resolved = resolve_url(value, base_url)
    if not resolved or _SVG_RE.search(resolved):
        return ""
    return resolved
