"""Base types used across gitpulse."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


@dataclass(frozen=True)
class FileChange:
    """Line counts for one path touched by a commit."""

    path: str
    added: int
    removed: int


@dataclass(frozen=True)
class Commit:
    """Information about a single commit.

    ``id`` is the full lowercase hex sha, so string order matches byte order.
    ``changes`` is only populated when diff statistics were requested.
    """

    id: str
    parents: Tuple[str, ...]
    author_name: str
    author_email: str
    timestamp: int
    message: str
    changes: Tuple[FileChange, ...] = field(default_factory=tuple)
    defect: Optional[str] = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0].strip() if lines else ""

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True)
class TagRange:
    """Commits reachable from ``to_id`` but not from ``from_id``, in walk order."""

    from_id: str
    to_id: str
    commits: Tuple[Commit, ...]

    def __len__(self) -> int:
        return len(self.commits)
