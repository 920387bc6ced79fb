"""gitpulse workflow integration using LangGraph for orchestration."""

import argparse
import asyncio
import os
import sys
from typing import Any, Dict, Optional

from langgraph.graph import END, StateGraph
from loguru import logger
from rich.console import Console

from gitpulse.config import load_config
from gitpulse.errors import ConfigurationError
from gitpulse.models.state import AgentState
from gitpulse.nodes.changelog_node import changelog_node
from gitpulse.nodes.repository_node import repository_node, route_command
from gitpulse.nodes.stats_node import stats_node
from gitpulse.render import changelog_markdown, stats_summary, stats_table


def create_workflow(config: Dict[str, Any]):
    """Create the gitpulse workflow graph."""
    workflow = StateGraph(AgentState)

    # Add nodes
    workflow.add_node("repository_node", repository_node)
    workflow.add_node("stats_node", stats_node)
    workflow.add_node("changelog_node", changelog_node)

    workflow.set_entry_point("repository_node")

    # Define edges
    workflow.add_conditional_edges(
        "repository_node",
        route_command,
        {"stats_node": "stats_node", "changelog_node": "changelog_node", "end": END},
    )
    workflow.add_edge("stats_node", END)
    workflow.add_edge("changelog_node", END)

    return workflow.compile()


def initial_state(config: Dict[str, Any], command: str = "stats", **inputs: Optional[str]) -> AgentState:
    """Build the state the workflow starts from."""
    state: AgentState = {
        "repo_path": config["repo_path"],
        "command": command,
        "config": config,
        "errors": [],
        "warnings": [],
    }
    state.update({key: value for key, value in inputs.items() if value is not None})
    return state


async def run_workflow_async(state: AgentState) -> AgentState:
    """Run the gitpulse workflow asynchronously and return the final state."""
    app = create_workflow(state.get("config", {}))
    final_state = state
    async for update in app.astream(state):
        final_state = list(update.values())[0]
        if final_state.get("errors"):
            logger.error(f"Errors encountered: {final_state['errors']}")

    return final_state


def run_workflow(state: AgentState) -> AgentState:
    """Synchronous wrapper for the async workflow."""
    return asyncio.run(run_workflow_async(state))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Contributor statistics and changelogs for a git repository")
    parser.add_argument("--path", type=str, help="Path to the Git repository (default: current directory)")
    parser.add_argument("--since", type=str, help="Exclude history reachable from this ref")
    parser.add_argument("--strict", action="store_true", default=None, help="Fail on malformed commits")
    parser.add_argument("--prefetch", type=int, help="Commits to read ahead on a worker thread")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    changelog_parser = subparsers.add_parser("changelog", help="Generate a changelog between two tags")
    changelog_parser.add_argument("from_tag", help="Starting tag (excluded)")
    changelog_parser.add_argument("to_tag", help="Ending tag (included)")
    changelog_parser.add_argument("--output", type=str, help="Write the changelog to this file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(repo_path=args.path, strict=args.strict, prefetch=args.prefetch)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else config["log_level"])

    config["repo_path"] = os.path.abspath(config["repo_path"])
    command = args.command or "stats"
    logger.info(f"Analyzing repository: {config['repo_path']}")

    state = initial_state(
        config,
        command=command,
        since_ref=args.since,
        from_tag=getattr(args, "from_tag", None),
        to_tag=getattr(args, "to_tag", None),
    )
    final_state = run_workflow(state)

    for warning in final_state.get("warnings", []):
        logger.warning(warning["warning"])

    if final_state.get("errors"):
        logger.error("Errors encountered during processing:")
        for error in final_state["errors"]:
            logger.error(f"- {error['node']}: {error['error']}")
        return 1

    console = Console()
    if command == "changelog":
        markdown = changelog_markdown(final_state["changelog"])
        if args.output:
            try:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write(markdown)
            except OSError as e:
                logger.error(f"Failed to write changelog: {e}")
                return 1
            logger.info(f"Changelog saved to: {args.output}")
        else:
            console.print(markdown, markup=False, highlight=False)
    elif final_state.get("repository_empty"):
        logger.warning("Repository is empty. No commits to analyze.")
    else:
        report = final_state["stats_report"]
        console.print(stats_table(report))
        console.print(stats_summary(report), markup=False, highlight=False)

    return 0


if __name__ == "__main__":
    sys.exit(main())
