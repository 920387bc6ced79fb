"""Tests for the statistics aggregator."""

from datetime import datetime, timezone

import pytest

from gitpulse.errors import MalformedCommitRecord
from gitpulse.models.base import Commit, FileChange
from gitpulse.nodes.aggregator import StatisticsAggregator, aggregate
from gitpulse.nodes.identity import IdentityResolver
from gitpulse.nodes.walker import walk

BASE_TIME = 1_700_000_000


@pytest.fixture
def commit_factory():
    """Factory fixture for creating Commit instances."""

    def create_commit(
        commit_id: str,
        author=("Alice", "alice@example.com"),
        when: int = 0,
        changes=(),
        defect=None,
    ) -> Commit:
        return Commit(
            id=commit_id.ljust(40, "0"),
            parents=(),
            author_name=author[0],
            author_email=author[1],
            timestamp=BASE_TIME + when,
            message=f"commit {commit_id}",
            changes=tuple(FileChange(*change) for change in changes),
            defect=defect,
        )

    return create_commit


def test_single_author_linear_history(fake_accessor):
    fake_accessor.add("c1", when=0, author=("A", "a@x"), changes=[("a.txt", 1, 0)])
    fake_accessor.add("c2", ["c1"], when=10, author=("A", "a@x"), changes=[("a.txt", 2, 1)])
    fake_accessor.add("c3", ["c2"], when=20, author=("A", "a@x"), changes=[("b.txt", 4, 0)])

    report = aggregate(walk(fake_accessor, "c3", with_stats=True))

    assert list(report.contributors) == ["a@x"]
    stats = report.contributors["a@x"]
    assert stats.commits == 3
    assert stats.lines_added == 7
    assert stats.lines_removed == 1
    assert stats.files == {"a.txt", "b.txt"}
    assert stats.files_touched == 2


def test_identities_sharing_an_address_are_summed(commit_factory):
    report = aggregate(
        [
            commit_factory("aa", author=("Alan", "a@x"), when=20, changes=[("x.py", 5, 0)]),
            commit_factory("bb", author=("Al", "a@x"), when=10, changes=[("y.py", 1, 2)]),
        ]
    )

    assert report.totals.contributors == 1
    stats = report.contributors["a@x"]
    assert stats.commits == 2
    assert stats.name == "Alan"
    assert stats.emails == {"a@x"}
    assert (stats.lines_added, stats.lines_removed) == (6, 2)


def test_first_and_last_seen_track_timestamps_not_arrival(commit_factory):
    # walk order is newest first; the middle commit arrives last here
    commits = [
        commit_factory("c3", when=300),
        commit_factory("c1", when=100),
        commit_factory("c2", when=200),
    ]

    stats = aggregate(commits).contributors["alice@example.com"]

    assert stats.first_seen == datetime.fromtimestamp(BASE_TIME + 100, tz=timezone.utc)
    assert stats.last_seen == datetime.fromtimestamp(BASE_TIME + 300, tz=timezone.utc)


def test_commit_counts_are_conserved(fake_accessor):
    fake_accessor.add("root", when=0, author=("A", "a@x"))
    fake_accessor.add("left", ["root"], when=10, author=("B", "b@x"))
    fake_accessor.add("right", ["root"], when=20, author=("C", "c@x"))
    fake_accessor.add("merge", ["left", "right"], when=30, author=("A", "A@X"))

    report = aggregate(walk(fake_accessor, "merge", with_stats=True))

    assert sum(stats.commits for stats in report.contributors.values()) == report.totals.commits == 4
    assert report.totals.contributors == 3
    assert report.contributors["a@x"].commits == 2


def test_repository_totals(commit_factory):
    report = aggregate(
        [
            commit_factory("aa", author=("A", "a@x"), when=50, changes=[("shared.py", 3, 1)]),
            commit_factory("bb", author=("B", "b@x"), when=5, changes=[("shared.py", 2, 2), ("b.py", 1, 0)]),
        ]
    )

    totals = report.totals
    assert totals.commits == 2
    assert totals.lines_added == 6
    assert totals.lines_removed == 3
    assert totals.files_touched == 2
    assert totals.first_commit == datetime.fromtimestamp(BASE_TIME + 5, tz=timezone.utc)
    assert totals.last_commit == datetime.fromtimestamp(BASE_TIME + 50, tz=timezone.utc)


def test_duplicate_commit_ids_count_once(commit_factory):
    commit = commit_factory("aa", changes=[("a.py", 1, 0)])

    report = aggregate([commit, commit])

    assert report.totals.commits == 1
    assert report.totals.lines_added == 1


def test_malformed_commit_is_skipped_in_lenient_mode(commit_factory):
    commits = [
        commit_factory("aa", changes=[("a.py", 1, 0)]),
        commit_factory("bb", defect="diff statistics unavailable"),
        commit_factory("cc", changes=[("b.py", -4, 0)]),
    ]

    report = aggregate(commits)

    assert report.totals.commits == 1
    assert report.totals.skipped == 2
    assert [skipped.hash[:2] for skipped in report.skipped] == ["bb", "cc"]
    assert report.skipped[0].reason == "diff statistics unavailable"


def test_malformed_commit_raises_in_strict_mode(commit_factory):
    aggregator = StatisticsAggregator(strict=True)
    aggregator.add(commit_factory("aa"))

    with pytest.raises(MalformedCommitRecord) as exc_info:
        aggregator.add(commit_factory("bb", defect="unreadable commit record"))

    assert exc_info.value.commit_id.startswith("bb")


def test_unknown_identity_is_grouped(commit_factory):
    report = aggregate([commit_factory("aa", author=("", "")), commit_factory("bb", author=("", ""))])

    assert report.contributors["unknown"].commits == 2
    assert report.contributors["unknown"].name == "Unknown"


def test_shared_resolver_is_used(commit_factory):
    resolver = IdentityResolver()
    aggregate([commit_factory("aa", author=("Alan", "a@x"))], resolver=resolver)

    assert "a@x" in resolver


def test_report_is_a_snapshot(commit_factory):
    aggregator = StatisticsAggregator()
    aggregator.add(commit_factory("aa"))
    report = aggregator.report()
    aggregator.add(commit_factory("bb"))

    assert report.contributors["alice@example.com"].commits == 1
    assert aggregator.report().contributors["alice@example.com"].commits == 2


def test_ranked_and_share(commit_factory):
    report = aggregate(
        [
            commit_factory("aa", author=("A", "a@x"), changes=[("a.py", 30, 0)]),
            commit_factory("bb", author=("B", "b@x"), changes=[("b.py", 5, 5)]),
            commit_factory("cc", author=("B", "b@x"), changes=[("b.py", 0, 0)]),
        ]
    )

    assert [stats.key for stats in report.ranked()] == ["b@x", "a@x"]
    assert report.share("a@x") == pytest.approx(75.0)
    assert report.share("b@x") == pytest.approx(25.0)
    assert report.share("nobody") == 0.0


def test_empty_stream(commit_factory):
    report = aggregate([])

    assert report.contributors == {}
    assert report.totals.commits == 0
    assert report.totals.first_commit is None
