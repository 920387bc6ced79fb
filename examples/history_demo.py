#!/usr/bin/env python3
"""
examples/history_demo.py

Demonstrates the gitpulse core entry points by analyzing a repository: the
lazy history walk, the contributor statistics table and, when two tags are
given, the changelog between them.
"""

import argparse
import os
import sys

from gitpulse.analysis import compute_changelog, compute_stats, iter_history
from gitpulse.errors import GitPulseError


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Demonstrate gitpulse's history analysis")
    parser.add_argument(
        "--repo-path",
        type=str,
        default=os.getcwd(),
        help="Path to Git repository (default: current directory)",
    )
    parser.add_argument("--limit", type=int, default=5, help="Number of recent commits to show")
    parser.add_argument("--from-tag", type=str, help="Changelog start tag")
    parser.add_argument("--to-tag", type=str, help="Changelog end tag")
    return parser.parse_args()


def format_commit(commit) -> str:
    """Format a single commit's information for display."""
    return f"{commit.id[:8]}  {commit.date.strftime('%Y-%m-%d %H:%M:%S')}  {commit.author_name:<20}  {commit.summary}"


def main():
    """Run the history demo."""
    args = parse_args()
    print(f"Running gitpulse on repository: {args.repo_path}")

    try:
        print(f"\nMost recent {args.limit} commits:")
        history = iter_history(args.repo_path)
        for index, commit in enumerate(history):
            if index >= args.limit:
                break
            print(format_commit(commit))
        # stopping early releases the repository handle
        history.close()

        report = compute_stats(args.repo_path)
        print(f"\n{report.totals.commits} commits by {report.totals.contributors} contributors")
        for stats in report.ranked():
            print(
                f"  {stats.name:<20} {stats.commits:>5} commits  "
                f"+{stats.lines_added} -{stats.lines_removed}  {report.share(stats.key):.1f}%"
            )
        if report.skipped:
            print(f"  ({len(report.skipped)} malformed commits skipped)")

        if args.from_tag and args.to_tag:
            changelog = compute_changelog(args.repo_path, args.from_tag, args.to_tag)
            print(f"\nChangelog {args.from_tag}..{args.to_tag} ({changelog.commit_count} commits):")
            for section in changelog.sections():
                print(f"  {section.title}")
                for entry in section.entries:
                    print(f"    - {entry.summary} ({entry.short_hash}) by {entry.author}")

    except GitPulseError as e:
        print(f"Error running gitpulse: {str(e)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
