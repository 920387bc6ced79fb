"""Types for contributor and repository statistics."""

from datetime import datetime
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field


class ContributorStats(BaseModel):
    """Running totals for one canonical contributor."""

    key: str = Field(..., description="Canonical contributor key")
    name: str = Field(..., description="Display name from the contributor's latest commit")
    emails: Set[str] = Field(default_factory=set, description="Raw addresses seen for this contributor")
    commits: int = Field(default=0, description="Number of commits attributed")
    lines_added: int = Field(default=0, description="Lines added across all commits")
    lines_removed: int = Field(default=0, description="Lines removed across all commits")
    files: Set[str] = Field(default_factory=set, description="Distinct paths touched")
    first_seen: Optional[datetime] = Field(default=None, description="Earliest commit timestamp")
    last_seen: Optional[datetime] = Field(default=None, description="Latest commit timestamp")

    @property
    def files_touched(self) -> int:
        return len(self.files)

    @property
    def lines_changed(self) -> int:
        return self.lines_added + self.lines_removed


class RepositoryTotals(BaseModel):
    """Repository-wide totals over everything that was traversed."""

    commits: int = 0
    contributors: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    files_touched: int = 0
    first_commit: Optional[datetime] = None
    last_commit: Optional[datetime] = None
    skipped: int = 0


class SkippedCommit(BaseModel):
    """A commit left out of the statistics because its record was malformed."""

    hash: str
    reason: str


class StatsReport(BaseModel):
    """Materialized statistics table handed to the presentation layer."""

    contributors: Dict[str, ContributorStats] = Field(default_factory=dict)
    totals: RepositoryTotals = Field(default_factory=RepositoryTotals)
    skipped: List[SkippedCommit] = Field(default_factory=list)

    def ranked(self) -> List[ContributorStats]:
        """Contributors ordered by commits, then changed lines (highest first)."""
        return sorted(
            self.contributors.values(),
            key=lambda stats: (-stats.commits, -stats.lines_changed, stats.key),
        )

    def share(self, key: str) -> float:
        """Percentage of all changed lines contributed by ``key``."""
        total = self.totals.lines_added + self.totals.lines_removed
        stats = self.contributors.get(key)
        if not total or stats is None:
            return 0.0
        return stats.lines_changed / total * 100.0
