"""Shared test fixtures for PR Author Stats tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pr_author_stats.models import (
    AuthorStats,
    ContributedRepo,
    ForkedRepoStats,
    IssueStat,
    PRDetail,
    Profile,
    RepoDetails,
)


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(
        login="testuser",
        name="Test User",
        created_at=datetime(2018, 3, 14, tzinfo=UTC),
        followers=50,
        following=12,
        public_repos=3,
    )


@pytest.fixture
def sample_bot_profile() -> Profile:
    return Profile(
        login="dependabot[bot]",
        created_at=datetime(2019, 1, 1, tzinfo=UTC),
        user_type="Bot",
        is_bot=True,
    )


@pytest.fixture
def sample_new_account_profile() -> Profile:
    return Profile(
        login="newuser",
        created_at=datetime.now(UTC) - timedelta(days=10),
        followers=0,
        public_repos=1,
    )


@pytest.fixture
def sample_repositories() -> list[RepoDetails]:
    return [
        RepoDetails(
            name="fastparse",
            full_name="testuser/fastparse",
            stars=120,
            forks=14,
            commit_activity=87,
            language="Python",
        ),
        RepoDetails(
            name="dotfiles",
            full_name="testuser/dotfiles",
            stars=3,
            language="Shell",
        ),
        RepoDetails(
            name="httpx",
            full_name="testuser/httpx",
            is_fork=True,
            commit_activity=4,
            language="Python",
        ),
    ]


@pytest.fixture
def sample_forked_repos() -> list[ForkedRepoStats]:
    return [
        ForkedRepoStats(
            forked_repo="httpx",
            parent_repo="encode/httpx",
            parent_stars=13000,
            pr_count=3,
            merged_pr_count=2,
            pr_details=[
                PRDetail(title="Fix proxy env parsing", state="closed", merged=True),
                PRDetail(title="Add HTTP/2 docs", state="closed", merged=True),
                PRDetail(title="WIP: retries", state="open"),
            ],
        ),
    ]


@pytest.fixture
def sample_issues() -> list[IssueStat]:
    return [
        IssueStat(
            title="Crash on empty input",
            repo="pallets/click",
            state="open",
            repo_stars=15000,
        ),
    ]


@pytest.fixture
def sample_contributions() -> list[ContributedRepo]:
    return [
        ContributedRepo(
            name="testuser/fastparse",
            stars=120,
            contribution_types=["PushEvent"],
        ),
        ContributedRepo(
            name="encode/httpx",
            stars=13000,
            contribution_types=["PullRequestEvent", "IssuesEvent"],
        ),
    ]


@pytest.fixture
def sample_author_stats(
    sample_profile: Profile,
    sample_repositories: list[RepoDetails],
    sample_forked_repos: list[ForkedRepoStats],
    sample_issues: list[IssueStat],
    sample_contributions: list[ContributedRepo],
) -> AuthorStats:
    return AuthorStats(
        author="testuser",
        profile=sample_profile,
        repositories=sample_repositories,
        forked_repos=sample_forked_repos,
        issues=sample_issues,
        contributions=sample_contributions,
    )
