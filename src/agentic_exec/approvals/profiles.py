"""Usage profiles for well-known filtering binaries.

Each profile bounds the positional arguments a safe bin may receive and
lists the flags that consume a value or are never allowed. Every listed
profile closes off the ways a pure filter could be made to read or write
files instead of operating on stdin.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class SafeBinProfile:
    """Argument policy for one safe bin.

    Attributes:
        min_positional: Minimum number of positional arguments.
        max_positional: Maximum number of positional arguments (None = unbounded).
        value_flags: Flags that consume the following token as their value.
        blocked_flags: Flags that always fail validation.
    """

    min_positional: int = 0
    max_positional: int | None = None
    value_flags: frozenset[str] = field(default_factory=frozenset)
    blocked_flags: frozenset[str] = field(default_factory=frozenset)


# Used for safe bins that have no dedicated profile
SAFE_BIN_GENERIC_PROFILE = SafeBinProfile()

_JQ = SafeBinProfile(
    max_positional=1,
    value_flags=frozenset(
        {
            "--arg",
            "--argjson",
            "--argstr",
            "--argfile",
            "--rawfile",
            "--slurpfile",
            "--from-file",
            "--library-path",
            "-L",
            "-f",
        }
    ),
    # File-reading options
    blocked_flags=frozenset(
        {
            "--argfile",
            "--rawfile",
            "--slurpfile",
            "--from-file",
            "--library-path",
            "-L",
            "-f",
        }
    ),
)

_GREP = SafeBinProfile(
    max_positional=1,
    value_flags=frozenset(
        {
            "--regexp",
            "--file",
            "--max-count",
            "--after-context",
            "--before-context",
            "--context",
            "--devices",
            "--directories",
            "--binary-files",
            "--exclude",
            "--exclude-from",
            "--include",
            "--label",
            "-e",
            "-f",
            "-m",
            "-A",
            "-B",
            "-C",
            "-D",
            "-d",
        }
    ),
    # Pattern files and directory traversal
    blocked_flags=frozenset(
        {
            "--file",
            "--exclude-from",
            "--dereference-recursive",
            "--directories",
            "--recursive",
            "-f",
            "-d",
            "-r",
            "-R",
        }
    ),
)

_CUT = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset(
        {
            "--bytes",
            "--characters",
            "--fields",
            "--delimiter",
            "--output-delimiter",
            "-b",
            "-c",
            "-f",
            "-d",
        }
    ),
)

_SORT = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset(
        {
            "--key",
            "--field-separator",
            "--buffer-size",
            "--temporary-directory",
            "--compress-program",
            "--parallel",
            "--batch-size",
            "--random-source",
            "--files0-from",
            "--output",
            "-k",
            "-t",
            "-S",
            "-T",
            "-o",
        }
    ),
    # Reads a file list or writes output to a file
    blocked_flags=frozenset({"--files0-from", "--output", "-o"}),
)

_UNIQ = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset(
        {
            "--skip-fields",
            "--skip-chars",
            "--check-chars",
            "--group",
            "-f",
            "-s",
            "-w",
        }
    ),
)

_HEAD = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset({"--lines", "--bytes", "-n", "-c"}),
)

_TAIL = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset(
        {
            "--lines",
            "--bytes",
            "--sleep-interval",
            "--max-unchanged-stats",
            "--pid",
            "-n",
            "-c",
        }
    ),
)

_TR = SafeBinProfile(min_positional=1, max_positional=2)

_WC = SafeBinProfile(
    max_positional=0,
    value_flags=frozenset({"--files0-from"}),
    blocked_flags=frozenset({"--files0-from"}),
)

SAFE_BIN_PROFILES: Mapping[str, SafeBinProfile] = MappingProxyType(
    {
        "jq": _JQ,
        "grep": _GREP,
        "cut": _CUT,
        "sort": _SORT,
        "uniq": _UNIQ,
        "head": _HEAD,
        "tail": _TAIL,
        "tr": _TR,
        "wc": _WC,
    }
)


def get_safe_bin_profile(name: str) -> SafeBinProfile:
    """Get the profile for a binary name, or the generic profile.

    Args:
        name: Executable name (matched case-insensitively).

    Returns:
        The registered SafeBinProfile, or SAFE_BIN_GENERIC_PROFILE.
    """
    return SAFE_BIN_PROFILES.get(name.lower(), SAFE_BIN_GENERIC_PROFILE)
