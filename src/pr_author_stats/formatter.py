"""Output formatting for PR author reports."""

from __future__ import annotations

import click

from pr_author_stats.models import AuthorLevel, AuthorReport

COMMENT_MARKER = "<!-- pr-author-stats -->"

_LEVEL_COLORS: dict[AuthorLevel, str] = {
    AuthorLevel.EXPERIENCED: "green",
    AuthorLevel.ACTIVE: "yellow",
    AuthorLevel.NEWCOMER: "red",
    AuthorLevel.UNKNOWN: "white",
    AuthorLevel.BOT: "blue",
}


def _more_line(total: int, shown: int) -> list[str]:
    if total > shown:
        return [f"- _... and {total - shown} more_"]
    return []


def _notes(report: AuthorReport) -> list[str]:
    notes: list[str] = []
    if report.flags.get("is_new_account"):
        age = report.summary.account_age_days
        notes.append(f"\u26a0\ufe0f New account ({age} days old)")
    if report.flags.get("partial_data"):
        failed = ", ".join(report.stats.failed_sections)
        notes.append(f"\u2139\ufe0f Some data could not be fetched: {failed}")
    if report.flags.get("has_insufficient_data"):
        notes.append("\u2139\ufe0f Insufficient public activity for a meaningful score")
    return notes


def format_stats_comment(report: AuthorReport, max_listed: int = 10) -> str:
    """Format an author report as a GitHub PR comment in Markdown."""
    stats = report.stats
    summary = report.summary

    if report.level == AuthorLevel.BOT:
        return "\n".join([
            COMMENT_MARKER,
            f"\U0001f916 **{stats.author}** is a bot account; stats skipped.",
            "",
        ])

    profile = stats.profile
    lines: list[str] = [
        COMMENT_MARKER,
        f"\U0001f4ca **Stats for {stats.author}** \U0001f4ca",
        "",
        f"**Score:** {report.score:.1f}/100 ({report.level.value})",
        "",
        "\U0001f465 **Profile**",
        f"- Followers: {profile.followers}",
        f"- Following: {profile.following}",
        f"- Created at: {profile.created_at.date().isoformat()}",
        f"- Public Repos: {profile.public_repos}",
        "",
        "\U0001f4c8 **Summary**",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Owned repositories | {summary.owned_repos} |",
        f"| Forked repositories | {summary.forked_repos} |",
        f"| Stars on owned repos | {summary.total_stars:,} |",
        f"| Commits (last year) | {summary.total_commit_activity:,} |",
        f"| PRs sent upstream | {summary.upstream_prs}"
        f" ({summary.merged_upstream_prs} merged) |",
        f"| Issues opened | {summary.issues_opened} |",
        f"| Repos contributed to recently | {summary.contributed_repos} |",
    ]
    if summary.top_languages:
        lines.append(f"| Top languages | {', '.join(summary.top_languages)} |")
    lines.append("")

    if stats.repositories:
        repos = sorted(stats.repositories, key=lambda r: r.stars, reverse=True)
        lines.append("\U0001f4e6 **Repositories**")
        lines.append("")
        for repo in repos[:max_listed]:
            lines.extend([
                f"- **{repo.name}**",
                f"  - Stars: {repo.stars}",
                f"  - Forks: {repo.forks}",
                f"  - Is Forked: {repo.is_fork}",
                f"  - Commit Activity: {repo.commit_activity}",
            ])
        lines.extend(_more_line(len(repos), max_listed))
        lines.append("")

    if stats.forked_repos:
        lines.append("\U0001f374 **Upstream PRs from forks**")
        lines.append("")
        for fork in stats.forked_repos[:max_listed]:
            lines.append(
                f"- **{fork.parent_repo}** (\u2b50 {fork.parent_stars}):"
                f" {fork.pr_count} PRs, {fork.merged_pr_count} merged"
            )
        lines.extend(_more_line(len(stats.forked_repos), max_listed))
        lines.append("")

    if stats.issues:
        lines.append("\U0001f41b **Issues**")
        lines.append("")
        for issue in stats.issues[:max_listed]:
            lines.append(f"- {issue.title} in `{issue.repo}` ({issue.state})")
        lines.extend(_more_line(len(stats.issues), max_listed))
        lines.append("")

    if stats.contributions:
        lines.append("\U0001f517 **Contributions**")
        lines.append("")
        for contrib in stats.contributions[:max_listed]:
            lines.extend([
                f"- **{contrib.name}**",
                f"  - Stars: {contrib.stars}",
                f"  - Contribution Type: {', '.join(contrib.contribution_types)}",
            ])
        lines.extend(_more_line(len(stats.contributions), max_listed))
        lines.append("")

    notes = _notes(report)
    if notes:
        lines.append("### Notes")
        lines.append("")
        for note in notes:
            lines.append(f"- {note}")
        lines.append("")

    return "\n".join(lines)


def format_cli_output(report: AuthorReport, verbose: bool = False) -> str:
    """Format an author report for terminal display with color."""
    color = _LEVEL_COLORS.get(report.level, "white")
    level_styled = click.style(report.level.value, fg=color, bold=True)
    score_styled = click.style(f"{report.score:.1f}", bold=True)

    lines: list[str] = [
        f"PR Author Stats: {level_styled} ({score_styled}/100)",
        f"User: {report.author}",
    ]
    if report.context_repo:
        lines.append(f"Context: {report.context_repo}")

    if verbose:
        s = report.summary
        lines.append("")
        lines.append(
            f"Followers: {s.followers} | Following: {s.following} | "
            f"Account age: {s.account_age_days} days"
        )
        lines.append(
            f"Owned repos: {s.owned_repos} | Forks: {s.forked_repos} | "
            f"Stars: {s.total_stars} | Commits (last year): {s.total_commit_activity}"
        )
        lines.append(
            f"Upstream PRs: {s.upstream_prs} ({s.merged_upstream_prs} merged) | "
            f"Issues: {s.issues_opened} | Recent repos: {s.contributed_repos}"
        )
        if s.top_languages:
            lines.append(f"Languages: {', '.join(s.top_languages)}")

        active_flags = [k for k, v in report.flags.items() if v]
        if active_flags:
            lines.append("")
            lines.append("Flags:")
            for flag in active_flags:
                lines.append(f"  - {flag}")

    return "\n".join(lines)


def format_json(report: AuthorReport) -> str:
    """Format an author report as JSON."""
    return report.model_dump_json(indent=2)
