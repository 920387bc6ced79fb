"""Stats node: contributor statistics for the requested history range."""

from loguru import logger

from gitpulse.analysis import compute_stats
from gitpulse.errors import GitPulseError
from gitpulse.models.state import AgentState


def stats_node(state: AgentState) -> AgentState:
    """Compute the statistics table and record skipped commits as warnings."""
    logger.info("Executing Stats Node")

    config = state.get("config", {})
    errors = list(state.get("errors", []))
    warnings = list(state.get("warnings", []))

    try:
        report = compute_stats(
            state["repo_path"],
            boundary=state.get("since_ref"),
            strict=config.get("strict", False),
            prefetch=config.get("prefetch", 0),
        )
    except GitPulseError as e:
        logger.error(f"Statistics failed: {e}")
        errors.append({"node": "stats_node", "error": str(e)})
        return {**state, "errors": errors}

    for skipped in report.skipped:
        warnings.append({"node": "stats_node", "warning": f"skipped {skipped.hash[:8]}: {skipped.reason}"})

    logger.info(f"Found {report.totals.contributors} contributors across {report.totals.commits} commits")
    return {**state, "stats_report": report, "errors": errors, "warnings": warnings}
