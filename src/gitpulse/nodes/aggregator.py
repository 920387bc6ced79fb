"""Per-contributor and repository-wide statistics over a commit stream."""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from loguru import logger

from gitpulse.errors import MalformedCommitRecord
from gitpulse.models.base import Commit
from gitpulse.models.stats import ContributorStats, RepositoryTotals, SkippedCommit, StatsReport
from gitpulse.nodes.identity import IdentityResolver


def check_record(commit: Commit) -> None:
    """Raise MalformedCommitRecord when a commit cannot be counted."""
    if commit.defect:
        raise MalformedCommitRecord(commit.id, commit.defect)
    if commit.timestamp is None or commit.timestamp < 0:
        raise MalformedCommitRecord(commit.id, f"invalid timestamp {commit.timestamp!r}")
    for change in commit.changes:
        if not change.path:
            raise MalformedCommitRecord(commit.id, "file change without a path")
        if change.added < 0 or change.removed < 0:
            raise MalformedCommitRecord(commit.id, f"negative line counts for {change.path}")


class StatisticsAggregator:
    """Accumulates ContributorStats in a single streaming pass.

    In lenient mode (the default) a malformed commit is logged, recorded in
    the report's ``skipped`` list, and left out of every count. In strict mode
    it raises MalformedCommitRecord.
    """

    def __init__(self, resolver: Optional[IdentityResolver] = None, strict: bool = False):
        self.resolver = resolver if resolver is not None else IdentityResolver()
        self.strict = strict
        self._contributors: Dict[str, ContributorStats] = {}
        self._seen: Set[str] = set()
        self._files: Set[str] = set()
        self._skipped: List[SkippedCommit] = []

    def add(self, commit: Commit) -> None:
        if commit.id in self._seen:
            return
        self._seen.add(commit.id)

        try:
            check_record(commit)
        except MalformedCommitRecord as e:
            if self.strict:
                raise
            logger.warning(f"Skipping commit {commit.id[:8]}: {e.reason}")
            self._skipped.append(SkippedCommit(hash=commit.id, reason=e.reason))
            return

        key = self.resolver.resolve(commit.author_name, commit.author_email, commit.timestamp)
        stats = self._contributors.get(key)
        if stats is None:
            stats = ContributorStats(key=key, name=self.resolver.display_name(key))
            self._contributors[key] = stats

        when = datetime.fromtimestamp(commit.timestamp, tz=timezone.utc)
        stats.commits += 1
        stats.name = self.resolver.display_name(key)
        if commit.author_email:
            stats.emails.add(commit.author_email)
        for change in commit.changes:
            stats.lines_added += change.added
            stats.lines_removed += change.removed
            stats.files.add(change.path)
            self._files.add(change.path)
        if stats.first_seen is None or when < stats.first_seen:
            stats.first_seen = when
        if stats.last_seen is None or when > stats.last_seen:
            stats.last_seen = when

    def aggregate(self, commits: Iterable[Commit]) -> StatsReport:
        for commit in commits:
            self.add(commit)
        return self.report()

    def report(self) -> StatsReport:
        contributors = list(self._contributors.values())
        first_seen = [stats.first_seen for stats in contributors if stats.first_seen]
        last_seen = [stats.last_seen for stats in contributors if stats.last_seen]
        totals = RepositoryTotals(
            commits=sum(stats.commits for stats in contributors),
            contributors=len(contributors),
            lines_added=sum(stats.lines_added for stats in contributors),
            lines_removed=sum(stats.lines_removed for stats in contributors),
            files_touched=len(self._files),
            first_commit=min(first_seen) if first_seen else None,
            last_commit=max(last_seen) if last_seen else None,
            skipped=len(self._skipped),
        )
        logger.info(
            f"Aggregated {totals.commits} commits from {totals.contributors} contributors"
            f" ({totals.skipped} skipped)"
        )
        return StatsReport(
            contributors={stats.key: stats.model_copy(deep=True) for stats in contributors},
            totals=totals,
            skipped=list(self._skipped),
        )


def aggregate(commits: Iterable[Commit], resolver: Optional[IdentityResolver] = None, strict: bool = False) -> StatsReport:
    """Aggregate a commit stream with a fresh aggregator."""
    return StatisticsAggregator(resolver=resolver, strict=strict).aggregate(commits)
