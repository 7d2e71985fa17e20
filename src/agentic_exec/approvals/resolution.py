"""Executable resolution and platform detection."""

import os
import shutil
from typing import Mapping

from agentic_exec.approvals.models import CommandResolution


def is_windows_platform(platform: str | None) -> bool:
    """Check if a platform string names Windows (``win32``, ``windows``)."""
    if not platform:
        return False
    return platform.strip().lower().startswith("win")


def _has_path_separator(value: str) -> bool:
    return "/" in value or "\\" in value


def _absolute(path: str, cwd: str | None) -> str:
    """Make a path absolute relative to cwd (or the process cwd)."""
    if not os.path.isabs(path):
        path = os.path.join(cwd or os.getcwd(), path)
    return os.path.normpath(path)


def resolve_command_resolution(
    executable: str,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResolution | None:
    """Resolve argv[0] to an executable name and path.

    Names containing a path separator resolve against ``cwd``. Bare names
    are looked up on ``PATH`` from ``env``, falling back to the process
    environment.

    Args:
        executable: The command name as written.
        cwd: Working directory the command would run in.
        env: Environment the command would run with.

    Returns:
        CommandResolution (with resolved_path None if nothing was found),
        or None if argv[0] is empty.
    """
    executable = executable.strip()
    if not executable:
        return None

    expanded = os.path.expanduser(executable)
    name = os.path.basename(expanded.rstrip("/\\"))
    if not name:
        return None

    if _has_path_separator(expanded):
        candidate = _absolute(expanded, cwd)
        resolved = candidate if os.path.isfile(candidate) and os.access(candidate, os.X_OK) else None
        return CommandResolution(
            raw_executable=executable,
            executable_name=name,
            resolved_path=resolved,
        )

    search_path = None
    if env is not None:
        search_path = env.get("PATH")
    if search_path is None:
        search_path = os.environ.get("PATH")

    found = shutil.which(expanded, path=_anchor_search_path(search_path, cwd))
    return CommandResolution(
        raw_executable=executable,
        executable_name=name,
        resolved_path=os.path.normpath(found) if found else None,
    )


def _anchor_search_path(search_path: str | None, cwd: str | None) -> str | None:
    """Make relative PATH entries absolute against cwd.

    An empty entry means the current directory, as in the shell.
    """
    if not search_path:
        return search_path
    return os.pathsep.join(
        _absolute(entry or os.curdir, cwd) for entry in search_path.split(os.pathsep)
    )


def resolve_allowlist_candidate_path(
    resolution: CommandResolution | None,
    cwd: str | None = None,
) -> str | None:
    """Get the path an allowlist entry should be matched against.

    Prefers the resolved path. For an unresolved executable written with a
    path separator, falls back to that path made absolute against ``cwd``.
    """
    if resolution is None:
        return None
    if resolution.resolved_path:
        return resolution.resolved_path
    raw = os.path.expanduser(resolution.raw_executable)
    if not _has_path_separator(raw):
        return None
    return _absolute(raw, cwd)
