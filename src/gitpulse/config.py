"""Runtime configuration loaded from the environment and an optional .env file."""

import os
from typing import Any, Dict

from dotenv import find_dotenv, load_dotenv

from gitpulse.errors import ConfigurationError

TRUE_VALUES = {"1", "true", "yes", "on"}
MIN_ABBREV = 4


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from e


def load_config(**overrides: Any) -> Dict[str, Any]:
    """Build the run configuration.

    Values come from the process environment (after loading ``.env`` when
    present). Keyword overrides that are not ``None`` take precedence, which is
    how command line flags are applied.
    """
    load_dotenv(find_dotenv(usecwd=True))

    config: Dict[str, Any] = {
        "repo_path": os.getenv("GITPULSE_REPO_PATH", "."),
        "strict": _env_flag("GITPULSE_STRICT"),
        "prefetch": _env_int("GITPULSE_PREFETCH", 0),
        "abbrev": _env_int("GITPULSE_ABBREV", 7),
        "log_level": os.getenv("GITPULSE_LOG_LEVEL", "INFO").upper(),
    }
    config.update({key: value for key, value in overrides.items() if value is not None})

    if config["abbrev"] < MIN_ABBREV:
        raise ConfigurationError(f"abbrev must be at least {MIN_ABBREV}, got {config['abbrev']}")
    if config["prefetch"] < 0:
        raise ConfigurationError(f"prefetch must not be negative, got {config['prefetch']}")

    return config
