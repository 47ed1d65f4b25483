"""Tests for ingest_articles.clean_articles.clean module."""

from ingest_articles.clean_articles.clean import (
    canonicalize_url,
    normalize_image_url,
    resolve_url,
    strip_html,
    truncate_summary,
)


class TestStripHtml:
    def test_strips_tags(self) -> None:
        assert strip_html("<h1>Title</h1> <p>Body</p>") == "Title Body"

    def test_drops_script_and_style_blocks(self) -> None:
        raw = "<p>Keep</p><script>var x = 1;</script><style>.a{}</style><p>this</p>"
        assert strip_html(raw) == "Keep this"

    def test_decodes_entities(self) -> None:
        assert strip_html("Army &amp; Navy&#8217;s &quot;plan&quot;") == "Army & Navy’s \"plan\""

    def test_keeps_bare_ampersands(self) -> None:
        title = "Q&As on Smith&Wesson and Johnson&Johnson deals"
        assert strip_html(title) == title

    def test_drops_unknown_and_truncated_entities(self) -> None:
        assert strip_html("Navy &bogus; plan") == "Navy plan"
        assert strip_html("Budget cut off at &hellip") == "Budget cut off at"

    def test_collapses_whitespace(self) -> None:
        assert strip_html("multiple   spaces \n\t here") == "multiple spaces here"

    def test_none_and_empty(self) -> None:
        assert strip_html(None) == ""
        assert strip_html("") == ""


class TestTruncateSummary:
    def test_short_text_unchanged(self) -> None:
        assert truncate_summary("short") == "short"

    def test_truncates_with_ellipsis(self) -> None:
        result = truncate_summary("a" * 500)
        assert len(result) == 420
        assert result.endswith("…")


class TestCanonicalizeUrl:
    def test_drops_fragment_and_tracking_params(self) -> None:
        url = "https://Example.com/story?utm_source=rss&id=42&fbclid=abc#comments"
        assert canonicalize_url(url) == "https://example.com/story?id=42"

    def test_keeps_query_without_tracking_params(self) -> None:
        assert canonicalize_url("https://example.com/a?b=1&c=2") == "https://example.com/a?b=1&c=2"

    def test_empty_path_becomes_slash(self) -> None:
        assert canonicalize_url("https://example.com") == "https://example.com/"

    def test_relative_input_returned_trimmed(self) -> None:
        assert canonicalize_url("  /relative/path  ") == "/relative/path"

    def test_empty(self) -> None:
        assert canonicalize_url(None) == ""


class TestResolveUrl:
    def test_resolves_relative(self) -> None:
        assert resolve_url("/img/a.jpg", "https://example.com/story/1") == "https://example.com/img/a.jpg"

    def test_rejects_data_and_javascript(self) -> None:
        assert resolve_url("data:image/png;base64,AAAA", "https://example.com/") == ""
        assert resolve_url("javascript:alert(1)", "https://example.com/") == ""

    def test_rejects_non_http_scheme(self) -> None:
        assert resolve_url("ftp://example.com/file", "https://example.com/") == ""


class TestNormalizeImageUrl:
    def test_drops_svg(self) -> None:
        assert normalize_image_url("/logo.svg?v=2", "https://example.com/") == ""

    def test_keeps_raster(self) -> None:
        assert normalize_image_url("https://cdn.example.com/a.jpg", "https://example.com/") == "https://cdn.example.com/a.jpg"
