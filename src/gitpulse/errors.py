"""Error types raised by gitpulse."""

from typing import Optional


class GitPulseError(Exception):
    """Base class for all gitpulse errors."""

    pass


class RepositoryError(GitPulseError):
    """Raised when a path does not point at a readable git repository."""

    def __init__(self, path: str, reason: str = "is not a git repository"):
        self.path = path
        self.reason = reason
        super().__init__(f"'{path}' {reason}")


class ConfigurationError(GitPulseError):
    """Raised when a configuration value cannot be interpreted."""

    pass


class UnresolvedReference(GitPulseError):
    """A ref name or commit id does not resolve to a commit."""

    def __init__(self, name: str, side: Optional[str] = None):
        self.name = name
        self.side = side
        if side:
            super().__init__(f"Cannot resolve {side} reference '{name}' to a commit")
        else:
            super().__init__(f"Cannot resolve reference '{name}' to a commit")


class UnresolvedTag(GitPulseError):
    """A tag requested for a changelog does not exist or does not point at a commit."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Tag '{tag}' does not exist or cannot be resolved to a commit")


class NotFound(GitPulseError):
    """A commit object expected by id is missing from the object store."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(f"Commit {commit_id} is missing from the repository")


class MalformedCommitRecord(GitPulseError):
    """A single commit record could not be read completely."""

    def __init__(self, commit_id: str, reason: str):
        self.commit_id = commit_id
        self.reason = reason
        super().__init__(f"Malformed commit {commit_id}: {reason}")
