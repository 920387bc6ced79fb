"""
Entry points for contributor statistics and changelogs.

Each call opens the repository, runs one traversal and releases the
repository handle before returning, including on errors.
"""

from typing import Iterator, Optional

from loguru import logger

from gitpulse.models.base import Commit
from gitpulse.models.changelog import Changelog
from gitpulse.models.stats import StatsReport
from gitpulse.nodes.aggregator import StatisticsAggregator
from gitpulse.nodes.changelog import ChangelogAssembler
from gitpulse.nodes.identity import IdentityResolver
from gitpulse.nodes.prefetch import prefetch as prefetch_commits
from gitpulse.nodes.walker import HistoryWalker
from gitpulse.repository import open_repository


def compute_stats(
    repo_root: str = ".",
    start: str = "HEAD",
    boundary: Optional[str] = None,
    strict: bool = False,
    prefetch: int = 0,
    resolver: Optional[IdentityResolver] = None,
) -> StatsReport:
    """Contributor statistics for commits reachable from ``start`` but not ``boundary``.

    Args:
        repo_root: Path to the repository working tree or git directory.
        start: Ref or commit id the walk starts from.
        boundary: Optional ref or commit id whose ancestry is excluded.
        strict: Raise on malformed commit records instead of skipping them.
        prefetch: Number of commits read ahead on a worker thread (0 disables it).
        resolver: Identity resolver to use; a fresh one by default.

    Returns:
        The materialized statistics table. An empty repository yields an
        empty report when walking from HEAD.
    """
    aggregator = StatisticsAggregator(resolver=resolver, strict=strict)
    with open_repository(repo_root) as accessor:
        if start == "HEAD" and accessor.is_empty():
            logger.warning(f"Repository {repo_root} is empty, no commits to analyze")
            return aggregator.report()

        commits = HistoryWalker(accessor).walk(start, boundary, with_stats=True)
        stream = prefetch_commits(commits, prefetch)
        try:
            return aggregator.aggregate(stream)
        finally:
            stream.close()


def compute_changelog(
    repo_root: str, from_tag: str, to_tag: str, abbrev: int = 7, with_diff: bool = True
) -> Changelog:
    """Changelog of the commits reachable from ``to_tag`` but not from ``from_tag``."""
    with open_repository(repo_root) as accessor:
        return ChangelogAssembler(accessor, abbrev=abbrev).changelog(from_tag, to_tag, with_diff=with_diff)


def iter_history(
    repo_root: str = ".", start: str = "HEAD", boundary: Optional[str] = None, with_stats: bool = False
) -> Iterator[Commit]:
    """Lazily yield commits in walk order.

    The repository stays open while the generator is alive and is closed when
    it is exhausted, closed early, or garbage collected.
    """
    with open_repository(repo_root) as accessor:
        yield from HistoryWalker(accessor).walk(start, boundary, with_stats=with_stats)
