"""Allowlist entry matching.

Allowlist patterns are path globs matched against the resolved executable:

- ``**`` matches any run of characters, including ``/``
- ``*`` matches any run of characters within one path component
- ``?`` matches one character within a path component
- a leading ``~`` expands to the home directory

Bare names (no path separator, no ``~``) never match: trusting ``python``
by name alone would trust whatever ``python`` is first on PATH.
"""

import os
import re
from functools import lru_cache
from typing import Iterable

from agentic_exec.approvals.models import CommandResolution, ExecAllowlistEntry
from agentic_exec.approvals.tokens import DRIVE_PREFIX_PATTERN


def _normalize_separators(value: str) -> str:
    return value.replace("\\", "/")


def is_path_pattern(pattern: str) -> bool:
    """Check if an allowlist pattern is path-shaped."""
    return pattern.startswith("~") or "/" in pattern or "\\" in pattern


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str, ignore_case: bool) -> re.Pattern[str]:
    """Translate a path glob into an anchored regex."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            if pattern[i : i + 2] == "**":
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        i += 1
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile("^" + "".join(parts) + "$", flags)


def matches_pattern(pattern: str, target_path: str) -> bool:
    """Check if a resolved executable path matches an allowlist pattern.

    Args:
        pattern: Allowlist glob.
        target_path: Absolute executable path.

    Returns:
        True if the pattern is path-shaped and matches the path.
    """
    pattern = pattern.strip()
    if not pattern or not target_path or not is_path_pattern(pattern):
        return False
    expanded = _normalize_separators(os.path.expanduser(pattern))
    target = _normalize_separators(target_path)
    # Windows paths are case-insensitive
    ignore_case = bool(DRIVE_PREFIX_PATTERN.match(target))
    return bool(_compile_pattern(expanded, ignore_case).match(target))


def match_allowlist(
    entries: Iterable[ExecAllowlistEntry],
    resolution: CommandResolution | None,
) -> ExecAllowlistEntry | None:
    """Find the first allowlist entry matching a resolved executable.

    Args:
        entries: Configured allowlist entries, in priority order.
        resolution: The segment's resolution (resolved_path is matched).

    Returns:
        The first matching entry, or None.
    """
    if resolution is None or not resolution.resolved_path:
        return None
    for entry in entries:
        if matches_pattern(entry.pattern, resolution.resolved_path):
            return entry
    return None
