"""Rendering of statistics tables and markdown changelogs."""

from typing import List

from rich.table import Table

from gitpulse.models.changelog import Changelog
from gitpulse.models.stats import StatsReport

DATE_FORMAT = "%Y-%m-%d"


def stats_table(report: StatsReport, title: str = "Contributors") -> Table:
    """Build a rich Table with one row per contributor, busiest first."""
    table = Table(title=title)
    table.add_column("Author", style="cyan")
    table.add_column("Commits", justify="right", style="green")
    table.add_column("Lines Added", justify="right", style="green")
    table.add_column("Lines Deleted", justify="right", style="red")
    table.add_column("Files", justify="right", style="yellow")
    table.add_column("Contribution %", justify="right", style="magenta")

    for stats in report.ranked():
        table.add_row(
            stats.name,
            str(stats.commits),
            str(stats.lines_added),
            str(stats.lines_removed),
            str(stats.files_touched),
            f"{report.share(stats.key):.2f}%",
        )
    return table


def stats_summary(report: StatsReport) -> str:
    """One-line repository totals, noting skipped commits when there are any."""
    totals = report.totals
    summary = (
        f"{totals.commits} commits by {totals.contributors} contributors, "
        f"+{totals.lines_added} -{totals.lines_removed} lines in {totals.files_touched} files"
    )
    if totals.first_commit and totals.last_commit:
        summary += f" ({totals.first_commit.strftime(DATE_FORMAT)} to {totals.last_commit.strftime(DATE_FORMAT)})"
    if totals.skipped:
        summary += f"; {totals.skipped} malformed commits skipped"
    return summary


def changelog_markdown(changelog: Changelog) -> str:
    """Format a changelog as markdown, grouped into sections."""
    lines: List[str] = [f"# Changelog from {changelog.from_tag} to {changelog.to_tag}", ""]

    lines.extend(["## Statistics", ""])
    if changelog.diff is not None:
        lines.append(f"- Files changed: {changelog.diff.files_changed}")
        lines.append(f"- Lines added: {changelog.diff.insertions}")
        lines.append(f"- Lines deleted: {changelog.diff.deletions}")
    lines.extend([f"- Total commits: {changelog.commit_count}", ""])

    for section in changelog.sections():
        lines.extend([f"## {section.title}", ""])
        for entry in section.entries:
            lines.append(f"- {entry.summary} ({entry.short_hash})")
            lines.append(f"  _by {entry.author} on {entry.date.strftime(DATE_FORMAT)}_")
        lines.append("")

    return "\n".join(lines)
