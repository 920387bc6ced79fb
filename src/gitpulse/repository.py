"""
Read-only access to a local git repository through GitPython.

Everything the history walker, aggregator and changelog assembler know about a
repository goes through RepositoryAccessor, which also translates GitPython
exceptions into gitpulse errors.
"""

from contextlib import contextmanager
from typing import Iterator, List

from git import Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects.commit import Commit as GitCommit
from loguru import logger

from gitpulse.errors import MalformedCommitRecord, NotFound, RepositoryError, UnresolvedReference, UnresolvedTag
from gitpulse.models.base import Commit, FileChange


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


def _count(value: str) -> int:
    # numstat prints "-" for binary files
    return 0 if value == "-" else int(value)


def parse_numstat(text: str) -> List[FileChange]:
    """Parse ``git diff --numstat -z`` output into FileChange records.

    With ``-z`` records are NUL-terminated and paths are written verbatim,
    without the quoting and octal escapes git otherwise applies.
    """
    changes = []
    for record in text.split("\0"):
        record = record.strip("\n")
        if not record:
            continue
        added, removed, path = record.split("\t", 2)
        changes.append(FileChange(path=path, added=_count(added), removed=_count(removed)))
    return changes


class RepositoryAccessor:
    """Commit graph, diff statistics and ref resolution for one repository."""

    def __init__(self, repo_path: str):
        self.path = str(repo_path)
        try:
            self.repo = Repo(self.path)
        except NoSuchPathError as e:
            raise RepositoryError(self.path, "does not exist") from e
        except InvalidGitRepositoryError as e:
            raise RepositoryError(self.path) from e
        logger.debug(f"Opened repository {self.path}")

    def __enter__(self) -> "RepositoryAccessor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the persistent git processes held by the Repo."""
        self.repo.close()
        logger.debug(f"Closed repository {self.path}")

    def is_empty(self) -> bool:
        """True when HEAD does not point at any commit yet."""
        return not self.repo.head.is_valid()

    def _existing(self, rev: str) -> GitCommit:
        obj = self.repo.commit(rev)
        # GitPython builds the null sha without consulting the object store
        self.repo.odb.info(obj.binsha)
        return obj

    def _load(self, commit_id: str) -> GitCommit:
        try:
            return self._existing(commit_id)
        except (BadName, BadObject, ValueError) as e:
            raise NotFound(commit_id) from e

    def resolve_ref(self, name: str) -> str:
        """Resolve a ref name, tag, or (abbreviated) sha to a full commit id."""
        try:
            return self._existing(name).hexsha
        except (BadName, BadObject, ValueError) as e:
            raise UnresolvedReference(name) from e

    def resolve_tag(self, name: str) -> str:
        """Resolve a tag name (lightweight or annotated) to the commit it points at."""
        try:
            return self.repo.tags[name].commit.hexsha
        except (IndexError, BadName, BadObject, ValueError) as e:
            raise UnresolvedTag(name) from e

    def parents(self, commit_id: str) -> List[str]:
        obj = self._load(commit_id)
        try:
            return [parent.hexsha for parent in obj.parents]
        except (ValueError, IndexError, TypeError) as e:
            raise MalformedCommitRecord(commit_id, f"unreadable parents ({e})") from e

    def commit(self, commit_id: str) -> Commit:
        """Read commit metadata.

        Raises NotFound when the object does not exist. A record that exists
        but cannot be parsed is returned with ``defect`` set instead of raising,
        so the caller decides whether to skip it.
        """
        obj = self._load(commit_id)
        try:
            author = obj.author
            return Commit(
                id=obj.hexsha,
                parents=tuple(parent.hexsha for parent in obj.parents),
                author_name=_as_text(author.name).strip(),
                author_email=_as_text(author.email).strip(),
                timestamp=int(obj.committed_date),
                message=_as_text(obj.message),
            )
        except (ValueError, IndexError, TypeError, AttributeError) as e:
            logger.debug(f"Unreadable commit record {commit_id}: {e}")
            return Commit(
                id=commit_id,
                parents=(),
                author_name="",
                author_email="",
                timestamp=0,
                message="",
                defect=f"unreadable commit record ({e})",
            )

    def diff_stats(self, commit_id: str) -> List[FileChange]:
        """Per-file line counts against the first parent (or the empty tree for roots)."""
        obj = self._load(commit_id)
        options = {"r": True, "numstat": True, "z": True, "no_renames": True, "no_commit_id": True}
        try:
            if obj.parents:
                text = self.repo.git.diff_tree(obj.parents[0].hexsha, obj.hexsha, "--", **options)
            else:
                text = self.repo.git.diff_tree(obj.hexsha, "--", root=True, **options)
            return parse_numstat(text)
        except (GitCommandError, ValueError) as e:
            raise MalformedCommitRecord(commit_id, f"diff statistics unavailable ({e})") from e

    def tree_diff(self, from_id: str, to_id: str) -> List[FileChange]:
        """Per-file line counts between two commit trees."""
        try:
            text = self.repo.git.diff(from_id, to_id, "--", numstat=True, z=True, no_renames=True)
        except GitCommandError as e:
            raise RepositoryError(self.path, f"cannot be diffed between {from_id} and {to_id}") from e
        return parse_numstat(text)


@contextmanager
def open_repository(repo_path: str) -> Iterator[RepositoryAccessor]:
    """Open a repository for the duration of a ``with`` block."""
    accessor = RepositoryAccessor(repo_path)
    try:
        yield accessor
    finally:
        accessor.close()
