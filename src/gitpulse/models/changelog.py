"""Types for organizing changelog content."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

SECTION_TITLES: Dict[str, str] = {
    "features": "New Features",
    "fixes": "Bug Fixes",
    "other": "Other Changes",
}


class ChangelogEntry(BaseModel):
    """A single commit line in a changelog."""

    hash: str = Field(..., description="Full commit hash")
    short_hash: str = Field(..., description="Abbreviated commit hash")
    author: str = Field(..., description="Author display name")
    summary: str = Field(..., description="First line of the commit message")
    date: datetime = Field(..., description="Commit timestamp")
    category: str = Field(default="other", description="Section the entry belongs to")


class ChangelogSection(BaseModel):
    """Entries sharing a category, in changelog order."""

    category: str
    title: str
    entries: List[ChangelogEntry] = Field(default_factory=list)


class DiffSummary(BaseModel):
    """Tree-to-tree change totals between the two tags."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


class Changelog(BaseModel):
    """Commits between two tags, most recent first."""

    from_tag: str
    to_tag: str
    from_commit: str
    to_commit: str
    entries: List[ChangelogEntry] = Field(default_factory=list)
    diff: Optional[DiffSummary] = None

    @property
    def commit_count(self) -> int:
        return len(self.entries)

    def sections(self) -> List[ChangelogSection]:
        """Group entries by category, keeping entry order inside each section."""
        sections = {
            category: ChangelogSection(category=category, title=title)
            for category, title in SECTION_TITLES.items()
        }
        for entry in self.entries:
            sections.get(entry.category, sections["other"]).entries.append(entry)
        return [section for section in sections.values() if section.entries]
