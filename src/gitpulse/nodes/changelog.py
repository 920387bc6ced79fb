"""Changelog assembly for the commits between two tags."""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from gitpulse.models.base import Commit, TagRange
from gitpulse.models.changelog import Changelog, ChangelogEntry, DiffSummary
from gitpulse.nodes.identity import UNKNOWN_NAME
from gitpulse.nodes.walker import HistoryWalker

# Checked in order against the lower-cased summary line
CHANGELOG_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "features": ("merged pr", "feat", "task"),
    "fixes": ("fix", "bug"),
}


def categorize_entry(summary: str, categories: Dict[str, Tuple[str, ...]] = CHANGELOG_CATEGORIES) -> str:
    """Pick a changelog section from the summary line's prefix."""
    summary_lower = summary.strip().lower()
    for category, prefixes in categories.items():
        if summary_lower.startswith(prefixes):
            return category
    return "other"


class ChangelogAssembler:
    """Resolves a tag range and turns it into changelog entries."""

    def __init__(self, accessor, abbrev: int = 7):
        self.accessor = accessor
        self.abbrev = abbrev
        self.walker = HistoryWalker(accessor)

    def resolve_range(self, from_tag: str, to_tag: str) -> TagRange:
        """Commits reachable from ``to_tag`` but not from ``from_tag``, most recent first.

        Both tags are resolved before anything is walked, so an unknown tag
        raises UnresolvedTag without any partial result.
        """
        from_id = self.accessor.resolve_tag(from_tag)
        to_id = self.accessor.resolve_tag(to_tag)
        commits = tuple(self.walker.walk(to_id, boundary=from_id))
        logger.debug(f"Range {from_tag}..{to_tag} holds {len(commits)} commits")
        return TagRange(from_id=from_id, to_id=to_id, commits=commits)

    def _entry(self, commit: Commit) -> ChangelogEntry:
        """Entry for one commit.

        The author is the name recorded on that commit, not the canonical
        display name an IdentityResolver would pick for the contributor.
        """
        summary = commit.summary
        return ChangelogEntry(
            hash=commit.id,
            short_hash=commit.id[: self.abbrev],
            author=commit.author_name or commit.author_email or UNKNOWN_NAME,
            summary=summary,
            date=commit.date,
            category=categorize_entry(summary),
        )

    def _diff_summary(self, from_id: str, to_id: str) -> DiffSummary:
        changes = self.accessor.tree_diff(from_id, to_id)
        return DiffSummary(
            files_changed=len(changes),
            insertions=sum(change.added for change in changes),
            deletions=sum(change.removed for change in changes),
        )

    def changelog(self, from_tag: str, to_tag: str, with_diff: bool = True) -> Changelog:
        tag_range = self.resolve_range(from_tag, to_tag)
        entries: List[ChangelogEntry] = [self._entry(commit) for commit in tag_range.commits]
        diff: Optional[DiffSummary] = None
        if with_diff:
            diff = self._diff_summary(tag_range.from_id, tag_range.to_id)
        logger.info(f"Assembled changelog {from_tag}..{to_tag} with {len(entries)} entries")
        return Changelog(
            from_tag=from_tag,
            to_tag=to_tag,
            from_commit=tag_range.from_id,
            to_commit=tag_range.to_id,
            entries=entries,
            diff=diff,
        )
