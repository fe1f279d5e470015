"""Tests for data models."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

from pr_author_stats.models import (
    AuthorLevel,
    AuthorReport,
    AuthorStats,
    AuthorSummary,
    ContributedRepo,
    PRContext,
    Profile,
    RepoDetails,
)


class TestProfile:
    def test_creation(self, sample_profile: Profile) -> None:
        assert sample_profile.login == "testuser"
        assert sample_profile.followers == 50
        assert sample_profile.user_type == "User"
        assert not sample_profile.is_bot

    def test_account_age_days(self) -> None:
        profile = Profile(
            login="test",
            created_at=datetime.now(UTC) - timedelta(days=100),
        )
        assert 99 <= profile.account_age_days <= 101

    def test_account_age_never_negative(self) -> None:
        profile = Profile(
            login="test",
            created_at=datetime.now(UTC) + timedelta(days=3),
        )
        assert profile.account_age_days == 0

    def test_parses_github_timestamp(self) -> None:
        profile = Profile(login="test", created_at="2018-03-14T10:00:00Z")
        assert profile.created_at == datetime(2018, 3, 14, 10, tzinfo=UTC)

    def test_bot_profile(self, sample_bot_profile: Profile) -> None:
        assert sample_bot_profile.is_bot
        assert sample_bot_profile.login == "dependabot[bot]"


class TestRepoDetails:
    def test_defaults(self) -> None:
        repo = RepoDetails(name="repo")
        assert repo.stars == 0
        assert repo.commit_activity == 0
        assert repo.language is None
        assert repo.created_at is None
        assert not repo.is_fork


class TestContributedRepo:
    def test_contribution_types_default_empty(self) -> None:
        assert ContributedRepo(name="a/b").contribution_types == []


class TestAuthorReport:
    def test_author_property(self, sample_author_stats: AuthorStats) -> None:
        report = AuthorReport(stats=sample_author_stats, summary=AuthorSummary())
        assert report.author == "testuser"
        assert report.level == AuthorLevel.UNKNOWN

    def test_json_roundtrip_keeps_level(self, sample_author_stats: AuthorStats) -> None:
        report = AuthorReport(
            stats=sample_author_stats,
            summary=AuthorSummary(followers=50),
            score=64.2,
            level=AuthorLevel.ACTIVE,
        )
        data = json.loads(report.model_dump_json())
        assert data["level"] == "ACTIVE"
        assert data["stats"]["profile"]["account_age_days"] > 0
        restored = AuthorReport.model_validate_json(report.model_dump_json())
        assert restored.level == AuthorLevel.ACTIVE
        assert restored.stats.repositories[0].name == "fastparse"


class TestPRContext:
    def test_full_repo(self) -> None:
        ctx = PRContext(author="testuser", owner="my-org", repo="my-repo", number=42)
        assert ctx.full_repo == "my-org/my-repo"
