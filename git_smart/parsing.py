"""
Parsers for git's textual output.

Everything that depends on the wording of git messages lives here, so a
change in git's output only needs fixing in one place.
"""

import re
from collections.abc import Iterable

from .config import DEFAULT_BENIGN_STASH_POP_PHRASES

HEAD_BRANCH_PATTERN = re.compile(r"HEAD branch:\s*(\S+)")

# Reported by `git remote show` when the remote HEAD cannot be resolved
UNKNOWN_HEAD_BRANCH = "(unknown)"


def parse_default_branch(output: str) -> str | None:
    """Extract the branch name following 'HEAD branch:' in `git remote show` output."""
    match = HEAD_BRANCH_PATTERN.search(output)
    if not match:
        return None
    branch = match.group(1)
    if branch == UNKNOWN_HEAD_BRANCH:
        return None
    return branch


def is_benign_stash_pop_failure(
    output: str,
    phrases: Iterable[str] = DEFAULT_BENIGN_STASH_POP_PHRASES,
) -> bool:
    """Check whether a failed `git stash pop` only means there was nothing to pop."""
    lowered = output.lower()
    return any(phrase.lower() in lowered for phrase in phrases if phrase)
