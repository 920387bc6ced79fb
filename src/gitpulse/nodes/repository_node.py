"""Repository node: validates the target repository before any analysis runs."""

from loguru import logger

from gitpulse.errors import GitPulseError
from gitpulse.models.state import AgentState
from gitpulse.repository import open_repository


def repository_node(state: AgentState) -> AgentState:
    """Check that ``repo_path`` is a git repository and whether it has commits."""
    if "repo_path" not in state:
        raise ValueError("repo_path is required in AgentState")

    logger.info("Executing Repository Node")

    errors = list(state.get("errors", []))
    try:
        with open_repository(state["repo_path"]) as accessor:
            empty = accessor.is_empty()
    except GitPulseError as e:
        logger.error(str(e))
        errors.append({"node": "repository_node", "error": str(e)})
        empty = True

    return {**state, "repository_empty": empty, "errors": errors}


def route_command(state: AgentState) -> str:
    """Pick the next node: stop on errors, otherwise follow the requested command."""
    if state.get("errors"):
        return "end"
    if state.get("command") == "changelog":
        return "changelog_node"
    return "stats_node"
