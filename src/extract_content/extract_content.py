"""Fetch an article page and extract its main text and lead image."""

from __future__ import annotations

import logging
import math
from typing import Optional

import requests
from lxml import etree
from lxml import html as lxml_html
from readability import Document

from common.datetime import utc_now
from common.errors import ContentExtractionError
from common.utils import clamp, collapse_whitespace
from extract_content.models import STATUS_FAILED, STATUS_FETCHED, ExtractedContent
from ingest_articles.clean_articles.clean import resolve_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "DefenseNewsAggregatorBot/2.0 (+https://localhost)"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

BODY_READ_FLOOR = 80
MIN_BODY_WORDS = 40
WORDS_PER_MINUTE = 220
EXCERPT_MAX_LENGTH = 460
NO_BODY_MESSAGE = "No usable article body found."


def _class_xpath(class_name: str) -> str:
    return f"//*[contains(concat(' ', normalize-space(@class), ' '), ' {class_name} ')]"


# Tried in order after readability
FALLBACK_CONTAINERS = (
    "//article",
    "//main",
    "//*[@role='main']",
    _class_xpath("article-body"),
    _class_xpath("post-content"),
    _class_xpath("entry-content"),
    _class_xpath("story-body"),
    _class_xpath("content-body"),
)

LEAD_IMAGE_META = (
    "//meta[@property='og:image']/@content",
    "//meta[@name='og:image']/@content",
    "//meta[@property='twitter:image']/@content",
    "//meta[@name='twitter:image']/@content",
)

LEAD_IMAGE_NODES = ("//article//img", "//main//img", "//img")

BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
    "table", "td", "th", "tr", "ul",
})


def count_words(text: str) -> int:
    return len(text.split())


def reading_minutes(word_count: int) -> int:
    if word_count <= 0:
        return 0
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def build_excerpt(text: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """Whitespace-collapsed text cut at a word boundary, with an ellipsis when truncated."""
    collapsed = collapse_whitespace(text)
    if len(collapsed) <= max_length:
        return collapsed
    cut = collapsed[: max_length - 1]
    if " " in cut:
        cut = cut[: cut.rindex(" ")]
    return cut.rstrip() + "…"


def _failed(message: str) -> ExtractedContent:
    return ExtractedContent(status=STATUS_FAILED, fetched_at=utc_now(), error=message)


def _element_text(element) -> str:
    """Text of an element keeping one line per block, each line whitespace-collapsed."""
    parts: list[str] = []
    for event, node in etree.iterwalk(element, events=("start", "end")):
        if not isinstance(node.tag, str):
            if event == "end" and node.tail:
                parts.append(node.tail)
            continue
        tag = node.tag.lower()
        if event == "start":
            if tag in BLOCK_TAGS:
                parts.append("\n")
            if node.text:
                parts.append(node.text)
        else:
            if tag in BLOCK_TAGS:
                parts.append("\n")
            if node is not element and node.tail:
                parts.append(node.tail)

    lines = (collapse_whitespace(line) for line in "".join(parts).splitlines())
    return "\n".join(line for line in lines if line)


def _drop_non_content(tree) -> None:
    for node in tree.xpath("//script|//style|//noscript"):
        node.drop_tree()


def _parse_html(html: str | bytes):
    try:
        tree = lxml_html.fromstring(html)
    except (etree.ParserError, ValueError) as e:
        raise ContentExtractionError("Unable to parse article HTML.") from e
    _drop_non_content(tree)
    return tree


def _readability_text(html: str | bytes) -> str:
    try:
        summary_html = Document(html).summary()
        return _element_text(lxml_html.fromstring(summary_html))
    except Exception as e:
        logger.warning("readability failed: %s", e)
        return ""


def _fallback_text(tree) -> str:
    for xpath in FALLBACK_CONTAINERS:
        nodes = tree.xpath(xpath)
        if not nodes:
            continue
        text = _element_text(nodes[0])
        if count_words(text) >= BODY_READ_FLOOR:
            return text

    body = tree.find(".//body")
    return _element_text(body if body is not None else tree)


def extract_lead_image(tree, article_url: str) -> Optional[str]:
    """First usable og:image/twitter:image, else the first non-SVG, non-logo image."""
    for xpath in LEAD_IMAGE_META:
        for content in tree.xpath(xpath):
            url = resolve_url(content, article_url)
            if url:
                return url

    for xpath in LEAD_IMAGE_NODES:
        for node in tree.xpath(xpath):
            src = node.get("src") or node.get("data-src") or node.get("data-original")
            url = resolve_url(src, article_url)
            if not url:
                continue
            lowered = url.lower()
            if lowered.endswith(".svg") or "logo" in lowered:
                continue
            return url
    return None


def _extract_or_raise(article_url: str, html: str | bytes) -> ExtractedContent:
    tree = _parse_html(html)
    lead_image = extract_lead_image(tree, article_url)

    text = _readability_text(html)
    if count_words(text) < BODY_READ_FLOOR:
        text = _fallback_text(tree)

    word_count = count_words(text)
    if word_count < MIN_BODY_WORDS:
        raise ContentExtractionError(NO_BODY_MESSAGE)

    return ExtractedContent(
        status=STATUS_FETCHED,
        fetched_at=utc_now(),
        full_text=text,
        excerpt=build_excerpt(text),
        lead_image_url=lead_image,
        word_count=word_count,
        reading_minutes=reading_minutes(word_count),
    )


def extract_content_from_html(article_url: str, html: str | bytes) -> ExtractedContent:
    """Extract content from an already fetched page. Failures come back as a failed result."""
    try:
        return _extract_or_raise(article_url, html)
    except ContentExtractionError as e:
        return _failed(str(e))


def extract_content(
    article_url: str,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
) -> ExtractedContent:
    """
    Fetch an article page and extract its content.

    Never raises for fetch or extraction problems: non-2xx responses,
    timeouts, non-HTML content types and empty bodies all yield a result
    with status "failed" and an error message.
    """
    timeout = clamp(timeout, 1, 30)
    try:
        response = requests.get(
            article_url,
            timeout=timeout,
            headers={"Accept": HTML_ACCEPT, "User-Agent": user_agent or DEFAULT_USER_AGENT},
        )
    except requests.Timeout:
        return _failed(f"Article request timed out after {timeout:g}s.")
    except requests.RequestException as e:
        return _failed(f"Article request failed: {e}")

    if not 200 <= response.status_code < 300:
        return _failed(f"Article request failed with status {response.status_code}.")

    content_type = (response.headers.get("content-type") or "").lower()
    if content_type and "text/html" not in content_type and "xml" not in content_type:
        return _failed(f"Unsupported content type: {content_type}")

    if not response.text.strip():
        return _failed("Article response body was empty.")

    result = extract_content_from_html(article_url, response.content)
    if not result.is_fetched:
        logger.warning("Content extraction failed for %s: %s", article_url, result.error)
    return result
