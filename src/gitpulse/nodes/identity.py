"""
Author identity normalization.

Commits record a free-form (name, address) pair, and the same person often
commits under several spellings of either. IdentityResolver folds those raw
identities into one contributor key per person. This is a heuristic: two
people sharing an address are merged, and one person using unrelated
addresses stays split. Nothing here verifies who actually wrote a commit.
"""

import re
from typing import Dict, Optional, Tuple

UNKNOWN_KEY = "unknown"
UNKNOWN_NAME = "Unknown"

_ADDRESS_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")
_WHITESPACE = re.compile(r"\s+")


def normalize_address(email: Optional[str]) -> Optional[str]:
    """Lower-cased address, or None when it is empty or malformed."""
    if not email:
        return None
    candidate = email.strip().strip("<>").strip().lower()
    if not _ADDRESS_PATTERN.match(candidate):
        return None
    return candidate


def normalize_name(name: Optional[str]) -> str:
    """Case-folded name with whitespace collapsed."""
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name).strip().casefold()


class IdentityResolver:
    """Maps raw (name, address) pairs to canonical contributor keys.

    The address is the primary key. Names are only used when the address is
    empty or malformed. Each resolver keeps its own mapping, so separate runs
    never share state.
    """

    def __init__(self):
        self._display: Dict[str, Tuple[Optional[int], str]] = {}
        self._fallback: Dict[str, str] = {}

    def resolve(self, name: Optional[str], email: Optional[str], timestamp: Optional[int] = None) -> str:
        """Return the contributor key for a raw identity.

        ``timestamp`` is the commit time of the identity's commit. The display
        name of a key follows the most recent commit by that value; calls
        without a timestamp simply replace the display name.
        """
        address = normalize_address(email)
        key = address or normalize_name(name) or UNKNOWN_KEY
        if key not in self._fallback:
            self._fallback[key] = (email or "").strip() or UNKNOWN_NAME

        display = _WHITESPACE.sub(" ", name or "").strip()
        if display:
            current = self._display.get(key)
            if current is None or timestamp is None or current[0] is None or timestamp >= current[0]:
                self._display[key] = (timestamp, display)
        return key

    def display_name(self, key: str) -> str:
        if key in self._display:
            return self._display[key][1]
        return self._fallback.get(key, UNKNOWN_NAME)

    def __contains__(self, key: str) -> bool:
        return key in self._fallback

    def __len__(self) -> int:
        return len(self._fallback)
