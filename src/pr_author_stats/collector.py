"""Collect a PR author's GitHub activity into :class:`AuthorStats`."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from datetime import UTC, datetime
from typing import Any, TypeVar

from pr_author_stats.config import StatsConfig
from pr_author_stats.exceptions import GitHubAPIError, RateLimitExhaustedError
from pr_author_stats.github_client import GitHubClient
from pr_author_stats.models import (
    AuthorStats,
    ContributedRepo,
    ForkedRepoStats,
    IssueStat,
    PRDetail,
    Profile,
    RepoDetails,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTRIBUTION_EVENT_TYPES = ("PushEvent", "PullRequestEvent", "IssuesEvent")


async def _gather(*coros: Coroutine[Any, Any, Any]) -> list[Any]:
    """Run *coros* concurrently; the first error cancels the rest and is re-raised."""
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
    except ExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]


async def _bounded_gather(
    limit: int, factories: list[Callable[[], Awaitable[T]]]
) -> list[T]:
    """Run coroutine factories concurrently, at most *limit* at a time."""
    semaphore = asyncio.Semaphore(limit)

    async def run(factory: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await factory()

    return await _gather(*(run(f) for f in factories))


async def _stars_or_zero(client: GitHubClient, full_name: str) -> int:
    owner, _, name = full_name.partition("/")
    try:
        repo = await client.get_repo(owner, name)
    except RateLimitExhaustedError:
        raise
    except GitHubAPIError as exc:
        logger.warning("Could not fetch repository %s: %s", full_name, exc)
        return 0
    return int(repo.get("stargazers_count") or 0)


def _repo_from_url(repository_url: str) -> str:
    """``https://api.github.com/repos/owner/name`` -> ``owner/name``."""
    return "/".join(repository_url.rstrip("/").split("/")[-2:])


async def get_user_repos(client: GitHubClient, username: str) -> list[RepoDetails]:
    """List the user's repositories with commit activity for the first few."""
    config = client.config
    raw_repos = await client.list_user_repos(username, repo_type="all")

    async def commit_activity(repo: dict[str, Any]) -> int:
        try:
            return await client.get_commit_activity(repo["owner"]["login"], repo["name"])
        except RateLimitExhaustedError:
            raise
        except GitHubAPIError as exc:
            logger.warning(
                "Commit activity unavailable for %s: %s", repo.get("full_name"), exc
            )
            return 0

    activity: list[int] = [0] * len(raw_repos)
    if config.sections.commit_activity:
        enriched = raw_repos[: config.fetch.max_commit_activity_repos]
        results = await _bounded_gather(
            config.fetch.concurrency,
            [lambda r=repo: commit_activity(r) for repo in enriched],
        )
        activity[: len(results)] = results

    return [
        RepoDetails(
            name=repo["name"],
            full_name=repo.get("full_name") or "",
            stars=repo.get("stargazers_count") or 0,
            forks=repo.get("forks_count") or 0,
            is_fork=bool(repo.get("fork")),
            commit_activity=commits,
            language=repo.get("language"),
            description=repo.get("description"),
            created_at=repo.get("created_at"),
        )
        for repo, commits in zip(raw_repos, activity, strict=True)
    ]


async def get_forked_repo_stats(
    client: GitHubClient, username: str, repos: list[RepoDetails]
) -> list[ForkedRepoStats]:
    """For each fork, find its parent and the PRs the user sent upstream."""
    config = client.config
    forks = [r for r in repos if r.is_fork][: config.fetch.max_forks_to_enrich]

    async def fork_stats(fork: RepoDetails) -> ForkedRepoStats | None:
        owner, _, name = (fork.full_name or f"{username}/{fork.name}").partition("/")
        try:
            repo_data = await client.get_repo(owner, name)
            parent = repo_data.get("parent") or repo_data.get("source")
            if not parent:
                logger.debug("Fork %s/%s has no parent", owner, name)
                return None
            parent_name = parent["full_name"]
            query = f"repo:{parent_name} type:pr author:{username}"
            total, items = await client.search_issues(
                query, max_items=config.fetch.max_upstream_prs
            )
            # Only the total is needed; the listed items may be truncated.
            merged_total, _ = await client.search_issues(
                f"{query} is:merged", max_items=0
            )
        except RateLimitExhaustedError:
            raise
        except GitHubAPIError as exc:
            logger.warning("Skipping fork %s/%s: %s", owner, name, exc)
            return None

        details = [
            PRDetail(
                title=item.get("title") or "",
                state=item.get("state") or "unknown",
                created_at=item.get("created_at"),
                merged=bool((item.get("pull_request") or {}).get("merged_at")),
            )
            for item in items
        ]
        return ForkedRepoStats(
            forked_repo=fork.name,
            parent_repo=parent_name,
            parent_stars=parent.get("stargazers_count") or 0,
            pr_count=total,
            merged_pr_count=merged_total,
            pr_details=details,
        )

    results = await _bounded_gather(
        config.fetch.concurrency, [lambda f=fork: fork_stats(f) for fork in forks]
    )
    return [r for r in results if r is not None]


async def get_user_issues(client: GitHubClient, username: str) -> list[IssueStat]:
    """Issues authored by the user, with the star count of each issue's repo."""
    config = client.config
    _, items = await client.search_issues(
        f"author:{username} type:issue", max_items=config.fetch.max_issues
    )
    repo_names = [_repo_from_url(item.get("repository_url", "")) for item in items]

    unique_repos = list(dict.fromkeys(repo_names))
    stars = await _bounded_gather(
        config.fetch.concurrency,
        [lambda n=name: _stars_or_zero(client, n) for name in unique_repos],
    )
    stars_by_repo = dict(zip(unique_repos, stars, strict=True))

    return [
        IssueStat(
            title=item.get("title") or "",
            repo=repo_name,
            state=item.get("state") or "unknown",
            created_at=item.get("created_at"),
            repo_stars=stars_by_repo.get(repo_name, 0),
        )
        for item, repo_name in zip(items, repo_names, strict=True)
    ]


async def get_contributed_repos(
    client: GitHubClient, username: str
) -> list[ContributedRepo]:
    """Repositories the user recently pushed to or opened PRs/issues on.

    Events are deduplicated by repository in first-seen order; each repo keeps
    the distinct event types seen for it.
    """
    events = await client.list_public_events(username)

    types_by_repo: dict[str, list[str]] = {}
    for event in events:
        event_type = event.get("type")
        if event_type not in CONTRIBUTION_EVENT_TYPES:
            continue
        repo_name = (event.get("repo") or {}).get("name")
        if not repo_name:
            continue
        seen = types_by_repo.setdefault(repo_name, [])
        if event_type not in seen:
            seen.append(event_type)

    names = list(types_by_repo)
    stars = await _bounded_gather(
        client.config.fetch.concurrency,
        [lambda n=name: _stars_or_zero(client, n) for name in names],
    )
    return [
        ContributedRepo(name=name, stars=star_count, contribution_types=types_by_repo[name])
        for name, star_count in zip(names, stars, strict=True)
    ]


async def _section(
    name: str, coro: Awaitable[list[T]], failed: list[str]
) -> list[T]:
    """Await a collection section, falling back to an empty result on API errors."""
    try:
        return await coro
    except RateLimitExhaustedError:
        raise
    except GitHubAPIError as exc:
        logger.warning("Section %s failed, continuing without it: %s", name, exc)
        failed.append(name)
        return []


async def _empty() -> list[Any]:
    return []


async def get_pr_author_stats(
    client: GitHubClient, username: str, config: StatsConfig | None = None
) -> AuthorStats:
    """Fetch the author's profile and every enabled activity section.

    Profile lookup errors are logged and re-raised; section errors fall back
    to empty lists and are recorded in ``failed_sections``.
    """
    config = config if config is not None else client.config
    sections = config.sections

    # App accounts such as "dependabot[bot]" get a synthetic profile.
    if client.is_bot_login(username):
        logger.info("Skipping collection for bot account %s", username)
        return AuthorStats(
            author=username,
            profile=Profile(
                login=username,
                created_at=datetime.now(tz=UTC),
                user_type="Bot",
                is_bot=True,
            ),
        )

    try:
        profile = await client.get_user(username)
    except GitHubAPIError:
        logger.exception("Error fetching author profile for %s", username)
        raise

    if profile.is_bot:
        return AuthorStats(author=username, profile=profile)

    failed: list[str] = []
    need_repos = sections.repositories or sections.forks
    repositories, issues, contributions = await _gather(
        _section("repositories", get_user_repos(client, username), failed)
        if need_repos else _empty(),
        _section("issues", get_user_issues(client, username), failed)
        if sections.issues else _empty(),
        _section("contributions", get_contributed_repos(client, username), failed)
        if sections.contributions else _empty(),
    )

    forked_repos: list[ForkedRepoStats] = []
    if sections.forks and repositories:
        forked_repos = await _section(
            "forks", get_forked_repo_stats(client, username, repositories), failed
        )

    return AuthorStats(
        author=username,
        profile=profile,
        repositories=repositories if sections.repositories else [],
        forked_repos=forked_repos,
        issues=issues,
        contributions=contributions,
        failed_sections=failed,
    )
