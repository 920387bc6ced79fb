"""Shared fixtures: an in-memory accessor and helpers for real git repositories."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest
from git import Actor, Repo

from gitpulse.errors import MalformedCommitRecord, NotFound, UnresolvedReference, UnresolvedTag
from gitpulse.models.base import Commit, FileChange

BASE_TIME = 1_700_000_000


def sha(label: str) -> str:
    """Deterministic 40-char hex id for a short label."""
    return label.encode().hex().ljust(40, "0")[:40]


class FakeAccessor:
    """In-memory stand-in for RepositoryAccessor with the same contract."""

    def __init__(self):
        self.commits: Dict[str, Commit] = {}
        self.refs: Dict[str, str] = {}
        self.tags: Dict[str, str] = {}
        self.broken_diffs: Dict[str, str] = {}
        self.parent_calls: List[str] = []

    def add(
        self,
        label: str,
        parents: Sequence[str] = (),
        when: int = 0,
        author: Tuple[str, str] = ("Alice", "alice@example.com"),
        message: Optional[str] = None,
        changes: Iterable[Tuple[str, int, int]] = (),
    ) -> str:
        commit_id = sha(label)
        self.commits[commit_id] = Commit(
            id=commit_id,
            parents=tuple(sha(parent) for parent in parents),
            author_name=author[0],
            author_email=author[1],
            timestamp=BASE_TIME + when,
            message=message if message is not None else f"Commit {label}\n\nBody of {label}",
            changes=tuple(FileChange(path, added, removed) for path, added, removed in changes),
        )
        self.refs[label] = commit_id
        return commit_id

    def resolve_ref(self, name: str) -> str:
        if name in self.commits:
            return name
        if name in self.refs:
            return self.refs[name]
        raise UnresolvedReference(name)

    def resolve_tag(self, name: str) -> str:
        if name not in self.tags:
            raise UnresolvedTag(name)
        return self.tags[name]

    def commit(self, commit_id: str) -> Commit:
        if commit_id not in self.commits:
            raise NotFound(commit_id)
        stored = self.commits[commit_id]
        # metadata only, like the real accessor
        return Commit(
            id=stored.id,
            parents=stored.parents,
            author_name=stored.author_name,
            author_email=stored.author_email,
            timestamp=stored.timestamp,
            message=stored.message,
            defect=stored.defect,
        )

    def parents(self, commit_id: str) -> List[str]:
        self.parent_calls.append(commit_id)
        if commit_id not in self.commits:
            raise NotFound(commit_id)
        return list(self.commits[commit_id].parents)

    def diff_stats(self, commit_id: str) -> List[FileChange]:
        if commit_id in self.broken_diffs:
            raise MalformedCommitRecord(commit_id, self.broken_diffs[commit_id])
        return list(self.commits[commit_id].changes)

    def tree_diff(self, from_id: str, to_id: str) -> List[FileChange]:
        return []


@pytest.fixture
def fake_accessor():
    return FakeAccessor()


def create_commit(
    repo: Repo,
    file_name: str,
    content: str,
    message: str,
    author: Tuple[str, str] = ("A", "a@x"),
    when: int = 0,
    parents=None,
):
    """Write a file, stage it and commit with a fixed author and date."""
    file_path = Path(repo.working_dir) / file_name
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    repo.index.add([file_name])
    actor = Actor(*author)
    date = f"{BASE_TIME + when} +0000"
    return repo.index.commit(
        message,
        parent_commits=parents,
        author=actor,
        committer=actor,
        author_date=date,
        commit_date=date,
    )


@pytest.fixture
def git_commit():
    """Expose create_commit to tests."""
    return create_commit


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a basic temporary Git repository."""
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Tagger")
        writer.set_value("user", "email", "tagger@example.com")
    yield repo
    repo.close()


@pytest.fixture
def linear_repo(temp_git_repo):
    """C1 <- C2 <- C3 by a single author, tagged v1 at C1 and v3 at C3."""
    repo = temp_git_repo
    c1 = create_commit(repo, "notes.txt", "one\n", "Initial commit", when=0)
    c2 = create_commit(repo, "notes.txt", "one\ntwo\n", "feat: add second line", when=60)
    c3 = create_commit(repo, "notes.txt", "one\nthree\n", "fix: replace second line", when=120)
    repo.create_tag("v1", ref=c1)
    repo.create_tag("v3", ref=c3, message="Release v3")
    return Path(repo.working_dir), [c1.hexsha, c2.hexsha, c3.hexsha]
