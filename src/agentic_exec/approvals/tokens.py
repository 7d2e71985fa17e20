"""Literal, glob and path classification of argv tokens.

Safe bins are meant to read stdin only, so any argument that could name a
file (path-shaped) or expand to several (glob-shaped) is not a safe literal.
"""

import re

# Glob metacharacters the shell would expand
GLOB_PATTERN = re.compile(r"[*?\[\]]")

# Windows drive prefix, e.g. C:\ or d:/
DRIVE_PREFIX_PATTERN = re.compile(r"^[A-Za-z]:[\\/]")

PATH_PREFIXES = ("./", "../", "~", "/")

STDIN_TOKEN = "-"


def is_path_like_token(token: str) -> bool:
    """Check if a token is shaped like a filesystem path.

    Only explicit prefixes count: ``./``, ``../``, ``~``, ``/`` and drive
    letters. A bare name such as ``notes.txt`` is not path-like.
    """
    trimmed = token.strip()
    if not trimmed or trimmed == STDIN_TOKEN:
        return False
    if trimmed.startswith(PATH_PREFIXES):
        return True
    return bool(DRIVE_PREFIX_PATTERN.match(trimmed))


def has_glob_token(token: str) -> bool:
    """Check if a token contains a glob metacharacter."""
    return bool(GLOB_PATTERN.search(token))


def is_safe_literal_token(token: str) -> bool:
    """Check if a token is an opaque literal safe to pass to a safe bin.

    Empty tokens and the stdin placeholder ``-`` are always safe.
    """
    if not token or token == STDIN_TOKEN:
        return True
    return not has_glob_token(token) and not is_path_like_token(token)
