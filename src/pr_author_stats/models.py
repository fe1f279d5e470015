"""Data models for PR author statistics."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, computed_field


class AuthorLevel(StrEnum):
    """Experience classification for a PR author."""
    EXPERIENCED = "EXPERIENCED"
    ACTIVE = "ACTIVE"
    NEWCOMER = "NEWCOMER"
    BOT = "BOT"
    UNKNOWN = "UNKNOWN"


class Profile(BaseModel):
    """GitHub user profile data."""
    login: str
    created_at: datetime
    name: str | None = None
    user_type: str = "User"
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    public_gists: int = 0
    is_bot: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def account_age_days(self) -> int:
        delta = datetime.now(UTC) - self.created_at
        return max(0, delta.days)


class RepoDetails(BaseModel):
    """A repository listed for the author."""
    name: str
    full_name: str = ""
    stars: int = 0
    forks: int = 0
    is_fork: bool = False
    commit_activity: int = 0
    language: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class PRDetail(BaseModel):
    """A pull request the author opened against an upstream repository."""
    title: str
    state: str
    created_at: datetime | None = None
    merged: bool = False


class ForkedRepoStats(BaseModel):
    """A fork owned by the author and their PRs to its parent."""
    forked_repo: str
    parent_repo: str
    parent_stars: int = 0
    pr_count: int = 0
    merged_pr_count: int = 0
    pr_details: list[PRDetail] = []


class IssueStat(BaseModel):
    """An issue opened by the author."""
    title: str
    repo: str
    state: str
    created_at: datetime | None = None
    repo_stars: int = 0


class ContributedRepo(BaseModel):
    """A repository the author recently pushed to or opened PRs/issues on."""
    name: str
    stars: int = 0
    contribution_types: list[str] = []


class AuthorStats(BaseModel):
    """Everything collected about a PR author."""
    author: str
    profile: Profile
    repositories: list[RepoDetails] = []
    forked_repos: list[ForkedRepoStats] = []
    issues: list[IssueStat] = []
    contributions: list[ContributedRepo] = []
    failed_sections: list[str] = []


class AuthorSummary(BaseModel):
    """Counters aggregated from :class:`AuthorStats`."""
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    account_age_days: int = 0
    owned_repos: int = 0
    forked_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_commit_activity: int = 0
    upstream_prs: int = 0
    merged_upstream_prs: int = 0
    issues_opened: int = 0
    contributed_repos: int = 0
    contribution_events: int = 0
    top_languages: list[str] = []


class AuthorReport(BaseModel):
    """Scored result for a PR author."""
    stats: AuthorStats
    summary: AuthorSummary
    score: float = 0.0
    level: AuthorLevel = AuthorLevel.UNKNOWN
    flags: dict[str, bool] = {}
    context_repo: str = ""

    @property
    def author(self) -> str:
        return self.stats.author


class PRContext(BaseModel):
    """The pull request a run is reporting on."""
    author: str
    owner: str
    repo: str
    number: int

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"
