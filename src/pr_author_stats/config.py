"""Configuration models for PR Author Stats."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from pr_author_stats.exceptions import ConfigError

DEFAULT_CONFIG_FILES = (".pr-author-stats.yml", ".pr-author-stats.yaml")


class FetchConfig(BaseModel):
    """GitHub API fetch parameters."""
    per_page: int = Field(default=100, ge=1, le=100)
    max_repos: int = Field(default=100, ge=0)
    max_commit_activity_repos: int = Field(default=30, ge=0)
    max_forks_to_enrich: int = Field(default=20, ge=0)
    max_upstream_prs: int = Field(default=100, ge=0)
    max_issues: int = Field(default=100, ge=0)
    max_events: int = Field(default=100, ge=0)
    concurrency: int = Field(default=8, ge=1)
    timeout_seconds: float = 30.0


class SectionsConfig(BaseModel):
    """Which parts of the author's activity to collect."""
    repositories: bool = True
    commit_activity: bool = True
    forks: bool = True
    issues: bool = True
    contributions: bool = True


class ScoreWeights(BaseModel):
    """Weights applied to the log-scaled counters.

    The weighted sum is mapped onto 0-100 with ``raw / (raw + midpoint)``,
    so ``midpoint`` is the raw value that lands on a score of 50.
    """
    followers: float = 1.0
    total_stars: float = 1.0
    owned_repos: float = 0.8
    merged_upstream_prs: float = 1.5
    upstream_prs: float = 0.5
    issues_opened: float = 0.4
    contributed_repos: float = 0.8
    account_age_years: float = 2.0
    midpoint: float = Field(default=8.0, gt=0)


class ThresholdConfig(BaseModel):
    """Score thresholds for author levels."""
    experienced: float = 70.0
    active: float = 40.0
    new_account_days: int = 30


class CommentConfig(BaseModel):
    """PR comment behaviour."""
    update_existing: bool = True
    max_listed: int = Field(default=10, ge=0)
    skip_bots: bool = True


class StatsConfig(BaseModel):
    """Top-level configuration composing all sub-configs."""
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    comment: CommentConfig = Field(default_factory=CommentConfig)


_ENV_MAPPING: dict[str, tuple[str, str, type]] = {
    "PR_AUTHOR_STATS_PER_PAGE": ("fetch", "per_page", int),
    "PR_AUTHOR_STATS_MAX_REPOS": ("fetch", "max_repos", int),
    "PR_AUTHOR_STATS_CONCURRENCY": ("fetch", "concurrency", int),
    "PR_AUTHOR_STATS_EXPERIENCED": ("thresholds", "experienced", float),
    "PR_AUTHOR_STATS_ACTIVE": ("thresholds", "active", float),
    "PR_AUTHOR_STATS_MAX_LISTED": ("comment", "max_listed", int),
}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return yaml_data


def load_config(path: str | Path | None = None) -> StatsConfig:
    """Load configuration from YAML file, environment variables, and defaults.

    Priority (highest to lowest):
    1. Environment variables (PR_AUTHOR_STATS_*)
    2. YAML config file
    3. Defaults
    """
    config_data: dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            config_data = _read_yaml(config_path)
    else:
        for default_path in DEFAULT_CONFIG_FILES:
            p = Path(default_path)
            if p.exists():
                config_data = _read_yaml(p)
                break

    for env_var, (section, key, type_fn) in _ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        try:
            converted = type_fn(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {env_var}: {value!r}") from exc
        section_data = config_data.setdefault(section, {})
        if not isinstance(section_data, dict):
            raise ConfigError(f"Config section {section!r} must be a mapping")
        section_data[key] = converted

    try:
        return StatsConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
