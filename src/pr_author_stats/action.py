"""GitHub Action entry point for PR Author Stats."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Any

from pr_author_stats.collector import get_pr_author_stats
from pr_author_stats.config import StatsConfig, load_config
from pr_author_stats.exceptions import (
    ConfigError,
    MissingContextError,
    PRStatsError,
    RateLimitExhaustedError,
    UserNotFoundError,
)
from pr_author_stats.formatter import format_stats_comment
from pr_author_stats.github_client import GitHubClient
from pr_author_stats.models import AuthorLevel, AuthorReport, PRContext
from pr_author_stats.scorer import AuthorScorer

logger = logging.getLogger("pr_author_stats.action")


def read_pr_context(event: dict[str, Any], repository: str = "") -> PRContext:
    """Extract the PR author, number and repository from an event payload.

    *repository* (``owner/name``, usually ``GITHUB_REPOSITORY``) wins over the
    payload's ``repository.full_name``.
    """
    pr_data = event.get("pull_request") or {}
    author = (pr_data.get("user") or {}).get("login")
    pr_number = pr_data.get("number") or event.get("number")
    repository = repository or (event.get("repository") or {}).get("full_name", "")

    if not author:
        raise MissingContextError("pull_request.user.login")
    if not pr_number:
        raise MissingContextError("pull_request.number")

    repo_parts = repository.split("/")
    if len(repo_parts) != 2 or not all(repo_parts):
        raise MissingContextError(f"repository (got {repository!r})")

    return PRContext(
        author=author,
        owner=repo_parts[0],
        repo=repo_parts[1],
        number=int(pr_number),
    )


async def build_comment(
    client: GitHubClient, context: PRContext, config: StatsConfig
) -> tuple[AuthorReport, str]:
    """Collect and score the PR author, then render the comment body."""
    stats = await get_pr_author_stats(client, context.author, config)
    report = AuthorScorer(config).score(stats, context.full_repo)
    body = format_stats_comment(report, max_listed=config.comment.max_listed)
    return report, body


async def publish_comment(
    client: GitHubClient, context: PRContext, body: str, config: StatsConfig
) -> None:
    """Post *body* on the PR, replacing our earlier comment when configured to."""
    existing_comment_id = None
    if config.comment.update_existing:
        existing_comment_id = await client.find_existing_comment(
            context.owner, context.repo, context.number
        )
    if existing_comment_id:
        await client.update_pr_comment(
            context.owner, context.repo, existing_comment_id, body
        )
    else:
        await client.post_pr_comment(context.owner, context.repo, context.number, body)


async def analyze_pr_and_comment(
    client: GitHubClient, context: PRContext, config: StatsConfig
) -> AuthorReport:
    """Analyze the PR author and post the result as a comment on the PR."""
    try:
        report, body = await build_comment(client, context, config)
        if report.level == AuthorLevel.BOT and config.comment.skip_bots:
            logger.info("Not commenting on PR #%d: %s is a bot", context.number, context.author)
            return report
        await publish_comment(client, context, body, config)
    except PRStatsError as exc:
        logger.error("Error analyzing PR #%d by %s: %s", context.number, context.author, exc)
        raise

    logger.info("Successfully posted PR stats comment on %s#%d", context.full_repo, context.number)
    return report


async def run_action() -> None:
    """Main action logic."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    token = os.environ.get("GITHUB_TOKEN", "")
    event_path = os.environ.get("GITHUB_EVENT_PATH", "")
    repository = os.environ.get("GITHUB_REPOSITORY", "")

    # GitHub Actions exposes inputs as INPUT_<NAME> env vars
    config_path = os.environ.get("INPUT_CONFIG-PATH") or os.environ.get("INPUT_CONFIG_PATH")
    if config_path and not os.path.exists(config_path):
        logger.warning("Config file %s not found, using defaults", config_path)
        config_path = None
    should_comment = os.environ.get("INPUT_COMMENT", "true").lower() == "true"
    min_score_raw = os.environ.get("INPUT_MIN-SCORE") or "0"
    try:
        min_score = float(min_score_raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid min-score input: {min_score_raw!r}") from exc

    if not token:
        print("::error::GITHUB_TOKEN is required")
        sys.exit(1)

    if not event_path or not os.path.exists(event_path):
        logger.error("GITHUB_EVENT_PATH is not set or file does not exist")
        raise MissingContextError("GITHUB_EVENT_PATH")

    with open(event_path) as f:
        event = json.load(f)

    try:
        context = read_pr_context(event, repository)
    except MissingContextError as exc:
        logger.error("Could not read pull request context: %s", exc)
        raise

    config = load_config(config_path)

    async with GitHubClient(token=token, config=config) as client:
        if should_comment:
            report = await analyze_pr_and_comment(client, context, config)
        else:
            report, _ = await build_comment(client, context, config)

    _set_output("score", f"{report.score:.1f}")
    _set_output("level", report.level.value)
    _set_output("user", report.author)

    logger.info("PR Author Stats: %s (%.1f) for %s", report.level.value, report.score, context.author)

    if report.level != AuthorLevel.BOT and report.score < min_score:
        print(f"::error::Score {report.score:.1f} for {context.author} is below {min_score:.1f}")
        sys.exit(1)


def _set_output(name: str, value: str) -> None:
    """Set a GitHub Actions output variable."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a") as f:
            f.write(f"{name}={value}\n")


def main() -> None:
    """Entry point."""
    try:
        asyncio.run(run_action())
    except RateLimitExhaustedError as exc:
        print(f"::error::Rate limit exhausted. Resets at {exc.reset_at.isoformat()}. "
              "Consider using a GitHub App token for higher limits.")
        sys.exit(1)
    except UserNotFoundError as exc:
        print(f"::warning::User not found: {exc.login}. Setting outputs to UNKNOWN.")
        _set_output("score", "0.0")
        _set_output("level", AuthorLevel.UNKNOWN.value)
        _set_output("user", exc.login)
    except PRStatsError as exc:
        print(f"::error::{exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
