"""Example: Summarize a GitHub user's activity with PR Author Stats."""

from __future__ import annotations

import asyncio
import os

from pr_author_stats import analyze_author, load_config


async def main() -> None:
    report = await analyze_author(
        "octocat",
        config=load_config(),
        token=os.environ["GITHUB_TOKEN"],
        context_repo="octocat/Hello-World",
    )
    print(f"User: {report.author}")
    print(f"Level: {report.level}")

    if report.stats.failed_sections:
        print(f"Partial data -- missing {', '.join(report.stats.failed_sections)}")
    print(f"Score: {report.score:.1f}")
    print(f"Stars: {report.summary.total_stars}")
    print(f"Upstream PRs: {report.summary.upstream_prs} "
          f"({report.summary.merged_upstream_prs} merged)")


if __name__ == "__main__":
    asyncio.run(main())
