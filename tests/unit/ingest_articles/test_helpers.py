"""Tests for ingest_articles.helpers module."""

import pytest

from common.config import PullConfig
from ingest_articles.fetch_articles.sources import default_registry
from ingest_articles.helpers import parse_ingest_articles_args, parse_sources, resolve_pull_options


class TestParseSources:
    def test_empty_or_all_selects_everything(self) -> None:
        registry = default_registry()
        assert parse_sources(None, registry) == []
        assert parse_sources("all", registry) == []

    def test_filters_invalid(self) -> None:
        assert parse_sources("defense-news, bogus", default_registry()) == ["defense-news"]

    def test_raises_when_nothing_valid(self) -> None:
        with pytest.raises(ValueError, match="No valid sources"):
            parse_sources("bogus", default_registry())


class TestResolvePullOptions:
    def test_flags_override_config(self) -> None:
        args = parse_ingest_articles_args(["--limit", "20", "--timeout", "5"])
        options = resolve_pull_options(args, PullConfig(limit=800, since_hours=30, max_workers=3))
        assert options.limit == 20
        assert options.timeout_seconds == 5.0
        assert options.since_hours == 30
        assert options.max_workers == 3

    def test_output_flags(self) -> None:
        args = parse_ingest_articles_args(["--load-rds", "--config", "local"])
        assert args.load_rds is True
        assert args.load_local is False
        assert args.config == "local"
