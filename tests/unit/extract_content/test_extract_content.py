"""Tests for extract_content.extract_content module."""

from unittest.mock import Mock, patch

import requests
from lxml import html as lxml_html

from extract_content.extract_content import (
    NO_BODY_MESSAGE,
    _element_text,
    build_excerpt,
    count_words,
    extract_content,
    extract_content_from_html,
    extract_lead_image,
    reading_minutes,
)

ARTICLE_URL = "https://example.com/news/story"


def _words(n: int) -> str:
    return " ".join(f"word{i}" for i in range(n))


def _page(body: str, head: str = "") -> str:
    return f"<html><head><title>T</title>{head}</head><body>{body}</body></html>"


def _response(text: str, status_code: int = 200, content_type: str = "text/html; charset=utf-8") -> Mock:
    return Mock(
        status_code=status_code,
        headers={"content-type": content_type},
        text=text,
        content=text.encode(),
    )


class TestHelpers:
    def test_count_words(self) -> None:
        assert count_words("  one two\nthree ") == 3

    def test_reading_minutes(self) -> None:
        assert reading_minutes(0) == 0
        assert reading_minutes(1) == 1
        assert reading_minutes(220) == 1
        assert reading_minutes(221) == 2

    def test_excerpt_short_text(self) -> None:
        assert build_excerpt("one  two\nthree") == "one two three"

    def test_excerpt_truncates_at_word_boundary(self) -> None:
        excerpt = build_excerpt(_words(200))
        assert len(excerpt) <= 460
        assert excerpt.endswith("…")
        assert excerpt[:-1].split()[-1].startswith("word")

    def test_element_text_keeps_block_lines(self) -> None:
        element = lxml_html.fromstring("<div><p>One   two</p><p>three <b>four</b></p></div>")
        assert _element_text(element) == "One two\nthree four"


class TestLeadImage:
    def test_prefers_og_image(self) -> None:
        tree = lxml_html.fromstring(_page(
            '<img src="/inline.jpg">',
            head='<meta property="og:image" content="/images/lead.jpg">',
        ))
        assert extract_lead_image(tree, ARTICLE_URL) == "https://example.com/images/lead.jpg"

    def test_skips_logo_and_svg(self) -> None:
        tree = lxml_html.fromstring(_page(
            '<img src="/site-logo.png"><img src="/icon.svg"><img data-src="/photo.jpg">'
        ))
        assert extract_lead_image(tree, ARTICLE_URL) == "https://example.com/photo.jpg"

    def test_none(self) -> None:
        assert extract_lead_image(lxml_html.fromstring(_page("<p>x</p>")), ARTICLE_URL) is None


@patch("extract_content.extract_content._readability_text", return_value="")
class TestBodyThresholds:
    def test_forty_words_is_enough(self, _) -> None:
        result = extract_content_from_html(ARTICLE_URL, _page(f"<article><p>{_words(40)}</p></article>"))
        assert result.is_fetched
        assert result.word_count == 40
        assert result.reading_minutes == 1

    def test_thirty_nine_words_fails(self, _) -> None:
        result = extract_content_from_html(ARTICLE_URL, _page(f"<article><p>{_words(39)}</p></article>"))
        assert result.status == "failed"
        assert result.error == NO_BODY_MESSAGE
        assert result.full_text is None

    def test_container_used_at_eighty_words(self, _) -> None:
        page = _page(f"<nav>{_words(30)}</nav><article><p>{_words(80)}</p></article>")
        result = extract_content_from_html(ARTICLE_URL, page)
        assert result.word_count == 80

    def test_below_floor_falls_back_to_body(self, _) -> None:
        page = _page(f"<nav>{_words(30)}</nav><article><p>{_words(79)}</p></article>")
        result = extract_content_from_html(ARTICLE_URL, page)
        assert result.word_count == 109

    def test_scripts_are_ignored(self, _) -> None:
        page = _page(f"<script>{_words(100)}</script><main><p>{_words(45)}</p></main>")
        result = extract_content_from_html(ARTICLE_URL, page)
        assert result.word_count == 45


class TestReadability:
    def test_extracts_article_paragraphs(self) -> None:
        paragraphs = "".join(f"<p>{_words(60)} sentence ends here.</p>" for _ in range(3))
        page = _page(f"<div class='sidebar'><a href='/x'>Home</a></div><article>{paragraphs}</article>")
        result = extract_content_from_html(ARTICLE_URL, page)
        assert result.is_fetched
        assert result.word_count >= 180
        assert result.excerpt.startswith("word0 word1")


@patch("extract_content.extract_content.requests.get")
class TestExtractContent:
    def test_fetched(self, mock_get) -> None:
        mock_get.return_value = _response(_page(f"<article><p>{_words(120)}</p></article>"))
        result = extract_content(ARTICLE_URL, timeout=15)
        assert result.is_fetched
        assert result.error is None
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == 15

    def test_timeout_is_clamped(self, mock_get) -> None:
        mock_get.return_value = _response(_page(f"<article><p>{_words(120)}</p></article>"))
        extract_content(ARTICLE_URL, timeout=120)
        assert mock_get.call_args[1]["timeout"] == 30

    def test_non_2xx(self, mock_get) -> None:
        mock_get.return_value = _response("nope", status_code=404)
        result = extract_content(ARTICLE_URL)
        assert result.status == "failed"
        assert "404" in result.error

    def test_request_timeout(self, mock_get) -> None:
        mock_get.side_effect = requests.Timeout("slow")
        result = extract_content(ARTICLE_URL, timeout=5)
        assert result.status == "failed"
        assert "timed out" in result.error

    def test_transport_error(self, mock_get) -> None:
        mock_get.side_effect = requests.ConnectionError("refused")
        assert extract_content(ARTICLE_URL).status == "failed"

    def test_non_html_content_type(self, mock_get) -> None:
        mock_get.return_value = _response("%PDF", content_type="application/pdf")
        result = extract_content(ARTICLE_URL)
        assert result.status == "failed"
        assert "application/pdf" in result.error

    def test_empty_body(self, mock_get) -> None:
        mock_get.return_value = _response("   ")
        assert extract_content(ARTICLE_URL).error == "Article response body was empty."
