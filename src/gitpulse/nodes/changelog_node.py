"""Changelog node: commits between two tags."""

from loguru import logger

from gitpulse.analysis import compute_changelog
from gitpulse.errors import GitPulseError
from gitpulse.models.state import AgentState


def changelog_node(state: AgentState) -> AgentState:
    """Assemble the changelog for ``from_tag``..``to_tag``.

    Any failure leaves ``changelog`` unset, so callers never see a partial one.
    """
    if not state.get("from_tag") or not state.get("to_tag"):
        raise ValueError("from_tag and to_tag are required for the changelog command")

    logger.info("Executing Changelog Node")

    config = state.get("config", {})
    errors = list(state.get("errors", []))
    try:
        changelog = compute_changelog(
            state["repo_path"],
            state["from_tag"],
            state["to_tag"],
            abbrev=config.get("abbrev", 7),
        )
    except GitPulseError as e:
        logger.error(f"Changelog failed: {e}")
        errors.append({"node": "changelog_node", "error": str(e)})
        return {**state, "errors": errors}

    logger.info(f"Collected {changelog.commit_count} commits for the changelog")
    return {**state, "changelog": changelog, "errors": errors}
