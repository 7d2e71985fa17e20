"""Safe-bin sets and the safe-bin usage gate.

A segment passes the gate only if every guard in SAFE_BIN_GUARDS passes,
in order:

1. platform: never on Windows (PowerShell parses and expands differently)
2. configured: the safe-bin set is non-empty
3. membership: the executable name is in the safe-bin set
4. location: the resolved binary sits in a trusted directory
5. profile: the arguments pass the binary's usage profile
"""

import ntpath
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from agentic_exec.approvals.argv import validate_safe_bin_argv
from agentic_exec.approvals.models import CommandResolution, DenialReason
from agentic_exec.approvals.profiles import get_safe_bin_profile
from agentic_exec.approvals.resolution import is_windows_platform
from agentic_exec.approvals.trust import is_trusted_safe_bin_path
from agentic_exec.logging import Loggers

logger = Loggers.approvals()

DEFAULT_SAFE_BINS: tuple[str, ...] = (
    "jq",
    "grep",
    "cut",
    "sort",
    "uniq",
    "head",
    "tail",
    "tr",
    "wc",
)

# Distinguishes "not configured" from an explicit None
_UNSET: Any = object()


def normalize_safe_bins(entries: Any) -> frozenset[str]:
    """Normalize configured safe-bin names.

    Names are trimmed and lowercased; blanks and non-strings are dropped.
    Anything other than a list or tuple yields an empty set.
    """
    if not isinstance(entries, (list, tuple)):
        return frozenset()
    normalized = (entry.strip().lower() for entry in entries if isinstance(entry, str))
    return frozenset(entry for entry in normalized if entry)


def resolve_safe_bins(entries: Any = _UNSET) -> frozenset[str]:
    """Resolve the effective safe-bin set from configuration.

    Called without an argument (not configured), falls back to
    DEFAULT_SAFE_BINS. Any passed value, including None and [], is
    normalized as given, so None is an explicit opt-out.
    """
    if entries is _UNSET:
        return normalize_safe_bins(DEFAULT_SAFE_BINS)
    return normalize_safe_bins(entries)


@dataclass(frozen=True)
class SafeBinUsage:
    """Inputs to the safe-bin usage gate for one segment."""

    argv: list[str]
    resolution: CommandResolution | None
    safe_bins: frozenset[str]
    trusted_dirs: Iterable[str] | None
    platform: str

    @property
    def executable_name(self) -> str:
        if self.resolution is None or not self.resolution.executable_name:
            return ""
        return self.resolution.executable_name.lower()


def check_platform(usage: SafeBinUsage) -> DenialReason | None:
    """Safe bins are never honored on Windows; only allowlist entries are."""
    if is_windows_platform(usage.platform):
        return DenialReason.PLATFORM_POLICY_DENIED
    return None


def check_safe_bins_configured(usage: SafeBinUsage) -> DenialReason | None:
    if not usage.safe_bins:
        return DenialReason.NO_SAFE_BINS
    return None


def check_membership(usage: SafeBinUsage) -> DenialReason | None:
    name = usage.executable_name
    if not name:
        return DenialReason.UNRESOLVED_EXECUTABLE
    if name in usage.safe_bins:
        return None
    # grep.exe -> grep (unreachable while check_platform runs first)
    if is_windows_platform(usage.platform) and ntpath.splitext(name)[0] in usage.safe_bins:
        return None
    return DenialReason.NOT_A_SAFE_BIN


def check_trusted_location(usage: SafeBinUsage) -> DenialReason | None:
    resolved_path = usage.resolution.resolved_path if usage.resolution else None
    if not resolved_path:
        return DenialReason.UNRESOLVED_EXECUTABLE
    if not is_trusted_safe_bin_path(resolved_path, usage.trusted_dirs):
        return DenialReason.UNTRUSTED_LOCATION
    return None


def check_profile(usage: SafeBinUsage) -> DenialReason | None:
    profile = get_safe_bin_profile(usage.executable_name)
    if not validate_safe_bin_argv(usage.argv[1:], profile):
        return DenialReason.PROFILE_VIOLATION
    return None


SAFE_BIN_GUARDS: tuple[Callable[[SafeBinUsage], DenialReason | None], ...] = (
    check_platform,
    check_safe_bins_configured,
    check_membership,
    check_trusted_location,
    check_profile,
)


def check_safe_bin_usage(
    argv: list[str],
    resolution: CommandResolution | None,
    safe_bins: Iterable[str],
    trusted_safe_bin_dirs: Iterable[str] | None = None,
    platform: str | None = None,
) -> DenialReason | None:
    """Run the safe-bin guards for one segment.

    Args:
        argv: Full argv of the segment (argv[0] is the executable).
        resolution: The segment's resolved executable.
        safe_bins: Normalized safe-bin names.
        trusted_safe_bin_dirs: Trusted directories (None = defaults).
        platform: Target platform (defaults to sys.platform).

    Returns:
        None if the segment is a safe-bin usage, else the first denial reason.
    """
    usage = SafeBinUsage(
        argv=argv,
        resolution=resolution,
        safe_bins=frozenset(safe_bins),
        trusted_dirs=trusted_safe_bin_dirs,
        platform=platform or sys.platform,
    )
    for guard in SAFE_BIN_GUARDS:
        reason = guard(usage)
        if reason is not None:
            logger.debug(
                "safe_bin_denied",
                reason=reason.value,
                executable=usage.executable_name or None,
            )
            return reason
    return None


def is_safe_bin_usage(
    argv: list[str],
    resolution: CommandResolution | None,
    safe_bins: Iterable[str],
    trusted_safe_bin_dirs: Iterable[str] | None = None,
    platform: str | None = None,
) -> bool:
    """Check if a segment may run as a safe bin without confirmation."""
    return (
        check_safe_bin_usage(
            argv,
            resolution,
            safe_bins,
            trusted_safe_bin_dirs=trusted_safe_bin_dirs,
            platform=platform,
        )
        is None
    )
