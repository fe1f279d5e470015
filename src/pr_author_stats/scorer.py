"""Aggregate author statistics into counters and a heuristic score."""

from __future__ import annotations

import math
import os
from collections import Counter

from pr_author_stats.config import StatsConfig, load_config
from pr_author_stats.models import (
    AuthorLevel,
    AuthorReport,
    AuthorStats,
    AuthorSummary,
)


def summarize(stats: AuthorStats) -> AuthorSummary:
    """Reduce collected statistics to a flat set of counters."""
    owned = [r for r in stats.repositories if not r.is_fork]
    languages = Counter(r.language for r in stats.repositories if r.language)
    top_languages = [
        lang for lang, _ in sorted(languages.items(), key=lambda kv: (-kv[1], kv[0]))
    ][:3]

    return AuthorSummary(
        followers=stats.profile.followers,
        following=stats.profile.following,
        public_repos=stats.profile.public_repos,
        account_age_days=stats.profile.account_age_days,
        owned_repos=len(owned),
        forked_repos=len(stats.repositories) - len(owned),
        total_stars=sum(r.stars for r in owned),
        total_forks=sum(r.forks for r in owned),
        total_commit_activity=sum(r.commit_activity for r in stats.repositories),
        upstream_prs=sum(f.pr_count for f in stats.forked_repos),
        merged_upstream_prs=sum(f.merged_pr_count for f in stats.forked_repos),
        issues_opened=len(stats.issues),
        contributed_repos=len(stats.contributions),
        contribution_events=sum(len(c.contribution_types) for c in stats.contributions),
        top_languages=top_languages,
    )


class AuthorScorer:
    """Score PR authors from their collected GitHub activity."""

    def __init__(self, config: StatsConfig) -> None:
        self.config = config

    def score(self, stats: AuthorStats, context_repo: str = "") -> AuthorReport:
        """Summarize *stats* and attach a 0-100 score and a level."""
        summary = summarize(stats)
        flags: dict[str, bool] = {
            "is_bot": stats.profile.is_bot,
            "is_new_account": (
                not stats.profile.is_bot
                and summary.account_age_days < self.config.thresholds.new_account_days
            ),
            "partial_data": bool(stats.failed_sections),
            "has_insufficient_data": False,
        }

        if stats.profile.is_bot:
            return AuthorReport(
                stats=stats,
                summary=summary,
                score=0.0,
                level=AuthorLevel.BOT,
                flags=flags,
                context_repo=context_repo,
            )

        if self._has_no_activity(stats, summary):
            flags["has_insufficient_data"] = True
            return AuthorReport(
                stats=stats,
                summary=summary,
                score=0.0,
                level=AuthorLevel.UNKNOWN,
                flags=flags,
                context_repo=context_repo,
            )

        score = self._normalize(self.raw_score(summary))
        return AuthorReport(
            stats=stats,
            summary=summary,
            score=score,
            level=self._classify(score),
            flags=flags,
            context_repo=context_repo,
        )

    def raw_score(self, summary: AuthorSummary) -> float:
        """Weighted sum of log-scaled counters."""
        w = self.config.weights
        age_years = summary.account_age_days / 365.0
        return (
            w.followers * math.log1p(summary.followers)
            + w.total_stars * math.log1p(summary.total_stars)
            + w.owned_repos * math.log1p(summary.owned_repos)
            + w.merged_upstream_prs * math.log1p(summary.merged_upstream_prs)
            + w.upstream_prs * math.log1p(summary.upstream_prs)
            + w.issues_opened * math.log1p(summary.issues_opened)
            + w.contributed_repos * math.log1p(summary.contributed_repos)
            + w.account_age_years * math.log1p(age_years)
        )

    def _normalize(self, raw: float) -> float:
        """Map a raw score onto 0-100; ``raw == midpoint`` lands on 50."""
        if raw <= 0:
            return 0.0
        normalized = raw / (raw + self.config.weights.midpoint)
        return round(min(1.0, max(0.0, normalized)) * 100, 1)

    def _classify(self, score: float) -> AuthorLevel:
        if score >= self.config.thresholds.experienced:
            return AuthorLevel.EXPERIENCED
        if score >= self.config.thresholds.active:
            return AuthorLevel.ACTIVE
        return AuthorLevel.NEWCOMER

    @staticmethod
    def _has_no_activity(stats: AuthorStats, summary: AuthorSummary) -> bool:
        """True when nothing at all was found to score."""
        return (
            not stats.repositories
            and not stats.forked_repos
            and not stats.issues
            and not stats.contributions
            and summary.public_repos == 0
            and summary.followers == 0
        )


async def analyze_author(
    login: str,
    config: StatsConfig | None = None,
    token: str | None = None,
    context_repo: str = "",
) -> AuthorReport:
    """Convenience function: collect and score a GitHub user.

    Parameters
    ----------
    login:
        GitHub username to analyze.
    config:
        Optional configuration; defaults are used when *None*.
    token:
        GitHub token; falls back to the ``GITHUB_TOKEN`` env var.
    context_repo:
        ``owner/name`` of the repository the PR targets, carried into the
        report for display.
    """
    from pr_author_stats.collector import get_pr_author_stats
    from pr_author_stats.github_client import GitHubClient

    if config is None:
        config = load_config()

    if token is None:
        token = os.environ.get("GITHUB_TOKEN", "")

    async with GitHubClient(token=token, config=config) as client:
        stats = await get_pr_author_stats(client, login, config)

    return AuthorScorer(config).score(stats, context_repo)
