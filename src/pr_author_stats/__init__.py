"""PR Author Stats - GitHub activity summaries for pull request authors."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from pr_author_stats.config import StatsConfig, load_config
from pr_author_stats.exceptions import PRStatsError
from pr_author_stats.models import AuthorLevel, AuthorReport, AuthorStats
from pr_author_stats.scorer import AuthorScorer, analyze_author

try:
    __version__ = version("pr-author-stats")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "AuthorLevel",
    "AuthorReport",
    "AuthorScorer",
    "AuthorStats",
    "PRStatsError",
    "StatsConfig",
    "__version__",
    "analyze_author",
    "load_config",
]
