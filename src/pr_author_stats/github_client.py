"""Async GitHub REST client for fetching PR author activity."""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import UTC, datetime
from typing import Any

import httpx

from pr_author_stats.config import StatsConfig, load_config
from pr_author_stats.exceptions import (
    GitHubAPIError,
    RateLimitExhaustedError,
    RepoNotFoundError,
    UserNotFoundError,
)
from pr_author_stats.formatter import COMMENT_MARKER
from pr_author_stats.models import Profile

logger = logging.getLogger(__name__)

_GITHUB_BASE_URL = "https://api.github.com"


class GitHubClient:
    """Async GitHub REST client scoped to a single run.

    Repository lookups are memoised for the lifetime of the client so that
    forks, issues and events pointing at the same repository cost one request.
    """

    _BOT_SUFFIX_RE = re.compile(r"(\[bot\]|-bot|_bot|-app)$", re.IGNORECASE)
    _BOT_PREFIX_RE = re.compile(
        r"^(dependabot|renovate|greenkeeper|snyk-|codecov|stale"
        r"|mergify|allcontributors|github-actions|pre-commit-ci)",
        re.IGNORECASE,
    )

    def __init__(self, token: str, config: StatsConfig | None = None) -> None:
        self._token = token
        self._config = config if config is not None else load_config()
        self._client = httpx.AsyncClient(
            base_url=_GITHUB_BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=self._config.fetch.timeout_seconds,
            follow_redirects=True,
        )
        self._repo_cache: dict[str, dict[str, Any]] = {}
        self._repo_locks: dict[str, asyncio.Lock] = {}

    @property
    def config(self) -> StatsConfig:
        return self._config

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        if not response.content:
            return ""
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get("message", ""))
        return ""

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request with error and rate-limit handling.

        Raises:
            RateLimitExhaustedError: On 403 with a rate-limit message or on 429.
            GitHubAPIError: On transport failure or any other 4xx/5xx response.
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"{method} {url} failed: {exc}") from exc

        remaining = response.headers.get("X-RateLimit-Remaining")
        if response.status_code in (403, 429):
            message = self._error_message(response)
            if (
                response.status_code == 429
                or "rate limit" in message.lower()
                or remaining == "0"
            ):
                reset_header = response.headers.get("X-RateLimit-Reset")
                if reset_header:
                    reset_at = datetime.fromtimestamp(int(reset_header), tz=UTC)
                else:
                    reset_at = datetime.now(UTC)
                raise RateLimitExhaustedError(reset_at=reset_at)

        if response.status_code >= 400:
            raise GitHubAPIError(
                message=f"GitHub API returned {response.status_code} for {method} {url}",
                status_code=response.status_code,
                rate_limit_remaining=int(remaining) if remaining else None,
            )

        return response

    async def _paginate(
        self, url: str, params: dict[str, Any], max_items: int
    ) -> list[dict[str, Any]]:
        """Collect a page-numbered list endpoint until a short page or *max_items*."""
        per_page = self._config.fetch.per_page
        items: list[dict[str, Any]] = []
        page = 1

        while len(items) < max_items:
            response = await self._request(
                "GET", url, params={**params, "per_page": per_page, "page": page}
            )
            batch = response.json()
            items.extend(batch[: max_items - len(items)])
            if len(batch) < per_page:
                break
            page += 1

        return items

    @classmethod
    def is_bot_login(cls, login: str) -> bool:
        """Heuristic bot detection based on login patterns."""
        return bool(cls._BOT_SUFFIX_RE.search(login) or cls._BOT_PREFIX_RE.search(login))

    async def get_user(self, username: str) -> Profile:
        """Fetch a user profile via ``GET /users/{username}``."""
        try:
            response = await self._request("GET", f"/users/{username}")
        except GitHubAPIError as exc:
            if exc.status_code == 404:
                raise UserNotFoundError(login=username) from exc
            raise

        user = response.json()
        user_login = str(user["login"])
        user_type = str(user.get("type") or "User")
        return Profile(
            login=user_login,
            name=user.get("name"),
            user_type=user_type,
            created_at=user["created_at"],
            followers=user.get("followers", 0),
            following=user.get("following", 0),
            public_repos=user.get("public_repos", 0),
            public_gists=user.get("public_gists", 0),
            is_bot=user_type == "Bot" or self.is_bot_login(user_login),
        )

    async def list_user_repos(
        self, username: str, repo_type: str = "all"
    ) -> list[dict[str, Any]]:
        """List repositories for a user, page by page up to ``fetch.max_repos``."""
        return await self._paginate(
            f"/users/{username}/repos",
            {"type": repo_type},
            self._config.fetch.max_repos,
        )

    async def get_commit_activity(self, owner: str, repo: str) -> int:
        """Total commits over the last year from the weekly commit activity stats.

        GitHub answers 202 while it computes the statistics in the background;
        that, like an empty body, counts as no activity.
        """
        response = await self._request(
            "GET", f"/repos/{owner}/{repo}/stats/commit_activity"
        )
        if response.status_code in (202, 204) or not response.content:
            return 0
        weeks = response.json()
        if not isinstance(weeks, list):
            return 0
        return sum(int(week.get("total", 0)) for week in weeks)

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch a repository via ``GET /repos/{owner}/{repo}`` (memoised)."""
        key = f"{owner}/{repo}".lower()
        cached = self._repo_cache.get(key)
        if cached is not None:
            return cached

        lock = self._repo_locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._repo_cache.get(key)
            if cached is not None:
                return cached
            try:
                response = await self._request("GET", f"/repos/{owner}/{repo}")
            except GitHubAPIError as exc:
                if exc.status_code == 404:
                    raise RepoNotFoundError(repo=f"{owner}/{repo}") from exc
                raise
            data: dict[str, Any] = response.json()
            self._repo_cache[key] = data
            return data

    async def search_issues(
        self, query: str, max_items: int
    ) -> tuple[int, list[dict[str, Any]]]:
        """Search issues and pull requests.

        Returns ``(total_count, items)`` where *items* holds at most
        *max_items* results.
        """
        per_page = max(1, min(self._config.fetch.per_page, max_items))
        items: list[dict[str, Any]] = []
        total_count = 0
        page = 1

        while True:
            response = await self._request(
                "GET",
                "/search/issues",
                params={"q": query, "per_page": per_page, "page": page},
            )
            data = response.json()
            total_count = int(data.get("total_count", 0))
            batch = data.get("items", [])
            items.extend(batch[: max(0, max_items - len(items))])
            if (
                len(batch) < per_page
                or len(items) >= max_items
                or len(items) >= total_count
            ):
                break
            page += 1

        return total_count, items

    async def list_public_events(self, username: str) -> list[dict[str, Any]]:
        """List a user's recent public events up to ``fetch.max_events``."""
        return await self._paginate(
            f"/users/{username}/events/public",
            {},
            self._config.fetch.max_events,
        )

    async def get_pull_request(
        self, owner: str, repo: str, pr_number: int
    ) -> dict[str, Any]:
        """Fetch a single pull request."""
        response = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pr_number}")
        return response.json()  # type: ignore[no-any-return]

    # ------------------------------------------------------------------
    # PR comment helpers
    # ------------------------------------------------------------------

    async def post_pr_comment(
        self, owner: str, repo: str, pr_number: int, body: str
    ) -> dict[str, Any]:
        """Post a comment on a pull request.

        Uses the Issues API endpoint:
        ``POST /repos/{owner}/{repo}/issues/{pr_number}/comments``
        """
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{pr_number}/comments",
            json={"body": body},
        )
        return response.json()  # type: ignore[no-any-return]

    async def update_pr_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> dict[str, Any]:
        """Update an existing PR comment.

        ``PATCH /repos/{owner}/{repo}/issues/comments/{comment_id}``
        """
        response = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return response.json()  # type: ignore[no-any-return]

    async def find_existing_comment(
        self, owner: str, repo: str, pr_number: int
    ) -> int | None:
        """Find a previous stats comment on a pull request.

        Searches for :data:`~pr_author_stats.formatter.COMMENT_MARKER` in the
        body of each comment and returns the first match's ID.
        """
        comments = await self._paginate(
            f"/repos/{owner}/{repo}/issues/{pr_number}/comments",
            {},
            max_items=1000,
        )
        for comment in comments:
            body = str(comment.get("body") or "")
            if COMMENT_MARKER in body:
                return int(comment["id"])
        return None
