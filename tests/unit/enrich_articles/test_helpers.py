"""Tests for enrich_articles.helpers module."""

from common.config import EnrichmentConfig, PipelineConfig, PullConfig
from enrich_articles.helpers import apply_cli_overrides, parse_run_pipeline_args


class TestParseRunPipelineArgs:
    def test_defaults(self) -> None:
        args = parse_run_pipeline_args([])
        assert args.concurrency is None
        assert args.batch_limit is None
        assert args.cleanup_orphans is False
        assert args.load_local is False

    def test_flags(self) -> None:
        args = parse_run_pipeline_args(
            ["--sources", "defense-news", "--concurrency", "3", "--batch-limit", "40", "--cleanup-orphans"]
        )
        assert args.sources == "defense-news"
        assert args.concurrency == 3
        assert args.batch_limit == 40
        assert args.cleanup_orphans is True


class TestApplyCliOverrides:
    def test_no_flags_keeps_config(self) -> None:
        config = PipelineConfig(pull=PullConfig(limit=500), enrichment=EnrichmentConfig(concurrency=7))
        assert apply_cli_overrides(config, parse_run_pipeline_args([])) == config

    def test_flags_override_config(self) -> None:
        config = PipelineConfig(pull=PullConfig(limit=500, since_hours=48))
        args = parse_run_pipeline_args(["--limit", "25", "--timeout", "9", "--concurrency", "2", "--batch-limit", "10"])

        updated = apply_cli_overrides(config, args)

        assert updated.pull.limit == 25
        assert updated.pull.timeout_seconds == 9.0
        assert updated.pull.since_hours == 48
        assert updated.enrichment.concurrency == 2
        assert updated.enrichment.topic_concurrency == 2
        assert updated.enrichment.batch_limit == 10
