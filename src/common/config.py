"""Pipeline configuration loaded from YAML with dataclass defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"

DEFAULT_FEED_USER_AGENT = "DefenseNewsIngestBot/0.1 (+https://localhost)"
DEFAULT_ARTICLE_USER_AGENT = "DefenseNewsAggregatorBot/2.0 (+https://localhost)"


@dataclass(frozen=True)
class PullConfig:
    max_per_source: int = 30
    limit: int = 200
    since_hours: int = 168
    timeout_seconds: float = 15.0
    max_workers: int = 8
    user_agent: str = DEFAULT_FEED_USER_AGENT
    source_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentConfig:
    timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_ARTICLE_USER_AGENT


@dataclass(frozen=True)
class EnrichmentConfig:
    concurrency: int = 5
    topic_concurrency: int = 5
    batch_limit: int = 900


@dataclass(frozen=True)
class PersistenceConfig:
    chunk_size: int = 300
    max_attempts: int = 4
    backoff_seconds: float = 0.08


@dataclass(frozen=True)
class PipelineConfig:
    pull: PullConfig = field(default_factory=PullConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _section(data: dict, key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return value


def parse_config(data: dict) -> PipelineConfig:
    """Parse a config dictionary into a PipelineConfig, keeping defaults for missing keys."""
    pull_data = dict(_section(data, "pull"))
    if "source_ids" in pull_data:
        pull_data["source_ids"] = tuple(pull_data["source_ids"] or ())

    return PipelineConfig(
        pull=replace(PullConfig(), **pull_data),
        content=replace(ContentConfig(), **_section(data, "content")),
        enrichment=replace(EnrichmentConfig(), **_section(data, "enrichment")),
        persistence=replace(PersistenceConfig(), **_section(data, "persistence")),
    )


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> PipelineConfig:
    """Load a PipelineConfig from configs/<name>.yaml.

    If `config_name` is None, the CONFIG_ENV environment variable is used,
    then "prod".
    """
    path = find_config_path(config_name, config_dir, default_name="prod", env_var="CONFIG_ENV")
    return parse_config(load_yaml(path))
