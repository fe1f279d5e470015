"""Click-based CLI for PR Author Stats."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from pr_author_stats.action import analyze_pr_and_comment, build_comment
from pr_author_stats.config import load_config
from pr_author_stats.exceptions import PRStatsError
from pr_author_stats.formatter import format_cli_output, format_json
from pr_author_stats.github_client import GitHubClient
from pr_author_stats.models import PRContext
from pr_author_stats.scorer import analyze_author


def _parse_repo(repo: str) -> tuple[str, str]:
    parts = repo.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        click.echo("Error: repository must be in owner/name format.", err=True)
        sys.exit(1)
    return parts[0], parts[1]


def _require_token(token: str | None) -> str:
    if not token:
        click.echo("Error: GitHub token required. Set GITHUB_TOKEN or use --token.", err=True)
        sys.exit(1)
    return token


@click.group()
@click.version_option(package_name="pr-author-stats")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """PR Author Stats - GitHub activity summaries for pull request authors."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


@main.command()
@click.argument("username")
@click.option("--repo", default="", help="Context repository (owner/name)")
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def stats(
    username: str,
    repo: str,
    token: str | None,
    config_path: str | None,
    verbose: bool,
    output_json: bool,
) -> None:
    """Summarize a GitHub user's activity."""
    token = _require_token(token)
    if repo:
        _parse_repo(repo)
    try:
        config = load_config(config_path)
        report = asyncio.run(
            analyze_author(username, config=config, token=token, context_repo=repo)
        )
    except PRStatsError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(format_json(report))
    else:
        click.echo(format_cli_output(report, verbose=verbose))


async def _comment(
    owner: str,
    name: str,
    pr_number: int,
    token: str,
    config_path: str | None,
    dry_run: bool,
) -> str | None:
    config = load_config(config_path)
    async with GitHubClient(token=token, config=config) as client:
        pr = await client.get_pull_request(owner, name, pr_number)
        context = PRContext(
            author=pr["user"]["login"], owner=owner, repo=name, number=pr_number
        )
        if dry_run:
            _, body = await build_comment(client, context, config)
            return body
        await analyze_pr_and_comment(client, context, config)
    return None


@main.command()
@click.argument("repo")
@click.argument("pr_number", type=int)
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--dry-run", is_flag=True, help="Print the comment instead of posting it")
def comment(
    repo: str,
    pr_number: int,
    token: str | None,
    config_path: str | None,
    dry_run: bool,
) -> None:
    """Post the author stats comment on pull request PR_NUMBER of REPO."""
    token = _require_token(token)
    owner, name = _parse_repo(repo)

    try:
        body = asyncio.run(_comment(owner, name, pr_number, token, config_path, dry_run))
    except PRStatsError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if body is not None:
        click.echo(body)
    else:
        click.echo(f"Posted stats comment on {repo}#{pr_number}")
