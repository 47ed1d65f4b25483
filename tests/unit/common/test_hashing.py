"""Tests for common.hashing module."""

from common.hashing import generate_article_id


class TestGenerateArticleId:
    def test_deterministic_output(self) -> None:
        result1 = generate_article_id("https://breakingdefense.com/2024/01/story/")
        result2 = generate_article_id("https://breakingdefense.com/2024/01/story/")
        assert result1 == result2

    def test_returns_16_char_hex_string(self) -> None:
        result = generate_article_id("https://breakingdefense.com/2024/01/story/")
        assert len(result) == 16
        assert all(c in "0123456789abcdef" for c in result)

    def test_case_and_whitespace_insensitive(self) -> None:
        result1 = generate_article_id("https://Example.com/Story")
        result2 = generate_article_id("  https://example.com/story  ")
        assert result1 == result2

    def test_different_url_produces_different_id(self) -> None:
        result1 = generate_article_id("https://example.com/article1")
        result2 = generate_article_id("https://example.com/article2")
        assert result1 != result2
