"""Trust boundary for safe-bin executables.

A safe bin only counts if the executable that would actually run lives
directly inside a trusted directory. This defends against a same-named
binary planted earlier on PATH (e.g. ``./node_modules/.bin/grep``).
"""

import os
from typing import Iterable

DEFAULT_TRUSTED_SAFE_BIN_DIRS: frozenset[str] = frozenset({"/bin", "/usr/bin"})


def _normalize_dir(value: str) -> str | None:
    """Normalize a directory entry; None if it is not an absolute path."""
    expanded = os.path.expanduser(value.strip())
    if not expanded or not os.path.isabs(expanded):
        return None
    return os.path.normpath(expanded)


def normalize_trusted_safe_bin_dirs(entries: Iterable[str] | None) -> frozenset[str]:
    """Normalize directory entries, dropping blanks and relative paths."""
    if not entries:
        return frozenset()
    normalized = (
        _normalize_dir(entry) for entry in entries if isinstance(entry, str)
    )
    return frozenset(entry for entry in normalized if entry)


def resolve_trusted_safe_bin_dirs(extra: Iterable[str] | None = None) -> frozenset[str]:
    """Get the default trusted directories plus any configured extras."""
    return DEFAULT_TRUSTED_SAFE_BIN_DIRS | normalize_trusted_safe_bin_dirs(extra)


def is_trusted_safe_bin_path(
    resolved_path: str | None,
    trusted_dirs: Iterable[str] | None = None,
) -> bool:
    """Check if an executable's parent directory is trusted.

    The check is lexical: the path is normalized but not followed through
    symlinks, and only the immediate parent directory is compared.

    Args:
        resolved_path: Absolute path of the executable.
        trusted_dirs: Trusted directories (defaults to DEFAULT_TRUSTED_SAFE_BIN_DIRS).

    Returns:
        True if the executable sits directly inside a trusted directory.
    """
    if not resolved_path or not os.path.isabs(resolved_path):
        return False
    if trusted_dirs is None:
        trusted = DEFAULT_TRUSTED_SAFE_BIN_DIRS
    else:
        trusted = normalize_trusted_safe_bin_dirs(trusted_dirs)
    parent = os.path.dirname(os.path.normpath(resolved_path))
    return parent in trusted
