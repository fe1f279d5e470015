"""Tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pr_author_stats.config import (
    FetchConfig,
    ScoreWeights,
    StatsConfig,
    load_config,
)
from pr_author_stats.exceptions import ConfigError


class TestFetchConfig:
    def test_defaults(self) -> None:
        config = FetchConfig()
        assert config.per_page == 100
        assert config.max_repos == 100
        assert config.concurrency == 8

    def test_per_page_capped_at_api_maximum(self) -> None:
        with pytest.raises(ValueError):
            FetchConfig(per_page=101)


class TestScoreWeights:
    def test_midpoint_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            ScoreWeights(midpoint=0)


class TestStatsConfig:
    def test_defaults(self) -> None:
        config = StatsConfig()
        assert config.thresholds.experienced == 70.0
        assert config.thresholds.active == 40.0
        assert config.sections.forks is True
        assert config.comment.update_existing is True


class TestLoadConfig:
    def test_load_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert isinstance(config, StatsConfig)
        assert config.fetch.per_page == 100

    def test_load_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yml"
        config_file.write_text(yaml.dump({
            "fetch": {"max_repos": 50},
            "sections": {"commit_activity": False},
        }))
        config = load_config(config_file)
        assert config.fetch.max_repos == 50
        assert config.sections.commit_activity is False
        # Defaults preserved
        assert config.fetch.per_page == 100
        assert config.sections.issues is True

    def test_default_file_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".pr-author-stats.yml").write_text(
            yaml.dump({"comment": {"max_listed": 3}})
        )
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.comment.max_listed == 3

    def test_load_nonexistent_path(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "nonexistent.yml")
        assert config.fetch.per_page == 100

    def test_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yml"
        config_file.write_text("")
        config = load_config(config_file)
        assert config.thresholds.experienced == 70.0

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yml"
        config_file.write_text("fetch: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_file)

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_file)

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad-value.yml"
        config_file.write_text(yaml.dump({"fetch": {"concurrency": 0}}))
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(config_file)

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "config.yml"
        config_file.write_text(yaml.dump({"thresholds": {"experienced": 80.0}}))
        monkeypatch.setenv("PR_AUTHOR_STATS_EXPERIENCED", "90")
        monkeypatch.setenv("PR_AUTHOR_STATS_MAX_REPOS", "25")
        config = load_config(config_file)
        assert config.thresholds.experienced == 90.0
        assert config.fetch.max_repos == 25

    def test_env_override_bad_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PR_AUTHOR_STATS_CONCURRENCY", "lots")
        with pytest.raises(ConfigError, match="PR_AUTHOR_STATS_CONCURRENCY"):
            load_config()
