"""
History traversal in a deterministic, descendants-first order.

The walker first discovers the commit ids in range (reachable from ``start``,
not reachable from ``boundary``) and counts how many in-range children each
one has. It then releases commits Kahn-style: a commit becomes eligible once
all of its children were yielded, and among eligible commits the newest
commit timestamp goes first, ties broken by ascending id.
"""

import heapq
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Set, Tuple

from loguru import logger

from gitpulse.errors import MalformedCommitRecord, UnresolvedReference
from gitpulse.models.base import Commit


class HistoryWalker:
    """Walks the commit graph exposed by a repository accessor."""

    def __init__(self, accessor):
        self.accessor = accessor

    def _resolve(self, name: str, side: str) -> str:
        try:
            return self.accessor.resolve_ref(name)
        except UnresolvedReference as e:
            raise UnresolvedReference(name, side=side) from e

    def _parents(self, commit_id: str) -> List[str]:
        try:
            return list(self.accessor.parents(commit_id))
        except MalformedCommitRecord as e:
            logger.warning(f"Not following parents of {commit_id[:8]}: {e.reason}")
            return []

    def ancestors(self, commit_id: str) -> Set[str]:
        """All commit ids reachable from ``commit_id``, itself included."""
        seen = {commit_id}
        stack = [commit_id]
        while stack:
            for parent in self._parents(stack.pop()):
                if parent not in seen:
                    seen.add(parent)
                    stack.append(parent)
        return seen

    def walk(self, start: str, boundary: Optional[str] = None, with_stats: bool = False) -> Iterator[Commit]:
        """Yield commits reachable from ``start`` but not from ``boundary``.

        Both references are resolved immediately, so an unknown name raises
        UnresolvedReference here rather than on the first ``next()``. The
        returned iterator is lazy and can only be consumed once.
        """
        start_id = self._resolve(start, "start")
        boundary_id = self._resolve(boundary, "boundary") if boundary is not None else None
        return self._traverse(start_id, boundary_id, with_stats)

    def _traverse(self, start_id: str, boundary_id: Optional[str], with_stats: bool) -> Iterator[Commit]:
        excluded = self.ancestors(boundary_id) if boundary_id else set()
        if start_id in excluded:
            logger.debug(f"{start_id[:8]} is reachable from the boundary, nothing to walk")
            return

        # in-range parents of every commit, and the number of in-range children
        graph: Dict[str, List[str]] = {}
        pending: Dict[str, int] = {start_id: 0}
        stack = [start_id]
        while stack:
            current = stack.pop()
            parents = [parent for parent in self._parents(current) if parent not in excluded]
            graph[current] = parents
            for parent in parents:
                if parent not in pending:
                    pending[parent] = 0
                    stack.append(parent)
                pending[parent] += 1
        logger.debug(f"Walking {len(graph)} commits from {start_id[:8]}")

        frontier: Dict[str, Commit] = {}
        heap: List[Tuple[int, str]] = []

        def release(commit_id: str) -> None:
            commit = self.accessor.commit(commit_id)
            frontier[commit_id] = commit
            heapq.heappush(heap, (-commit.timestamp, commit_id))

        release(start_id)
        while heap:
            _, commit_id = heapq.heappop(heap)
            commit = frontier.pop(commit_id)
            for parent in graph[commit_id]:
                pending[parent] -= 1
                if pending[parent] == 0:
                    release(parent)
            if with_stats:
                commit = self._with_stats(commit)
            yield commit

    def _with_stats(self, commit: Commit) -> Commit:
        if commit.defect:
            return commit
        try:
            return replace(commit, changes=tuple(self.accessor.diff_stats(commit.id)))
        except MalformedCommitRecord as e:
            return replace(commit, defect=e.reason)


def walk(accessor, start: str, boundary: Optional[str] = None, with_stats: bool = False) -> Iterator[Commit]:
    """Shortcut for ``HistoryWalker(accessor).walk(...)``."""
    return HistoryWalker(accessor).walk(start, boundary, with_stats=with_stats)
