"""State management types for the gitpulse workflow."""

from typing import Any, Dict, List, Optional, TypedDict

from gitpulse.models.changelog import Changelog
from gitpulse.models.stats import StatsReport


class AgentState(TypedDict, total=False):
    """
    Shared state passed between nodes.
    Each node adds or modifies specific fields.
    """

    # Input
    repo_path: str
    command: str
    since_ref: Optional[str]
    from_tag: Optional[str]
    to_tag: Optional[str]
    config: Dict[str, Any]

    # Repository Node Output
    repository_empty: bool

    # Stats Node Output
    stats_report: StatsReport

    # Changelog Node Output
    changelog: Changelog

    # Global State
    errors: List[Dict[str, Any]]
    warnings: List[Dict[str, Any]]
