"""Shell command analysis for exec approvals.

Splits command text into chain parts and pipeline segments, tokenizes each
segment with shlex, and resolves its executable. Analysis fails closed:
anything that could run or read something the segment list does not show
(substitutions, expansions, redirections, background jobs, subshells)
produces ``ok=False`` instead of a best-effort parse.
"""

import re
import shlex
from typing import Iterator, Mapping

from agentic_exec.approvals.models import (
    ChainedPipeline,
    ExecCommandAnalysis,
    ExecCommandSegment,
    SimplePipeline,
)
from agentic_exec.approvals.resolution import (
    is_windows_platform,
    resolve_command_resolution,
)

CHAIN_OPERATORS = ("&&", "||", ";")
PIPE_OPERATOR = "|"

# Characters after `$` that start an expansion
EXPANSION_START = re.compile(r"[A-Za-z0-9_@*#?$!{-]")

# NAME=value prefix before the executable
ENV_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")

UNQUOTED = "unquoted"
SINGLE = "single"
DOUBLE = "double"
ESCAPED = "escaped"


def _scan(command: str) -> Iterator[tuple[int, str, str]]:
    """Yield (index, char, context) for each character of a command.

    Context is the quoting state the character is read in. A backslash and
    the character it escapes are both reported as ESCAPED. Single quotes
    escape nothing.
    """
    context = UNQUOTED
    i = 0
    while i < len(command):
        char = command[i]

        if context == SINGLE:
            if char == "'":
                context = UNQUOTED
                yield i, char, UNQUOTED
            else:
                yield i, char, SINGLE
            i += 1
            continue

        if char == "\\":
            yield i, char, ESCAPED
            if i + 1 < len(command):
                yield i + 1, command[i + 1], ESCAPED
            i += 2
            continue

        if context == DOUBLE:
            if char == '"':
                context = UNQUOTED
                yield i, char, UNQUOTED
            else:
                yield i, char, DOUBLE
            i += 1
            continue

        if char == "'":
            context = SINGLE
        elif char == '"':
            context = DOUBLE
        yield i, char, UNQUOTED
        i += 1


def _has_unbalanced_quotes(command: str) -> bool:
    open_quote = False
    for _, char, context in _scan(command):
        # Opening and closing quotes are both read unquoted
        if context == UNQUOTED and char in ("'", '"'):
            open_quote = not open_quote
    return open_quote


def _split_top_level(command: str, operators: tuple[str, ...]) -> list[str]:
    """Split a command on unquoted operators (longest operators first)."""
    parts: list[str] = []
    start = 0
    skip_until = -1

    for i, char, context in _scan(command):
        if i < skip_until or context != UNQUOTED:
            continue
        for op in operators:
            if command.startswith(op, i):
                parts.append(command[start:i])
                start = i + len(op)
                skip_until = start
                break

    parts.append(command[start:])
    return parts


def split_command_chain(command: str) -> list[str] | None:
    """Split a command on top-level ``&&``, ``||`` and ``;``.

    Args:
        command: Raw command text.

    Returns:
        The stripped chain parts, or None if the command has no top-level
        chain operator or would produce an empty part.
    """
    parts = _split_top_level(command, CHAIN_OPERATORS)
    if len(parts) < 2:
        return None
    stripped = [part.strip() for part in parts]
    if any(not part for part in stripped):
        return None
    return stripped


def _find_unsafe_construct(command: str, windows: bool = False) -> str | None:
    """Find the first construct the analyzer refuses to model.

    Returns:
        A human-readable reason, or None if the command is plain.
    """
    for i, char, context in _scan(command):
        if context in (SINGLE, ESCAPED):
            if context == ESCAPED and char in ("\n", "\r"):
                return "line continuation"
            continue

        next_char = command[i + 1] if i + 1 < len(command) else ""
        prev_char = command[i - 1] if i > 0 else ""

        if char == "`":
            return "command substitution (`...`)"
        if char == "$":
            if next_char == "(":
                return "command substitution ($(...))"
            if EXPANSION_START.match(next_char):
                return "parameter expansion"
            if context == UNQUOTED and next_char in ("'", '"'):
                return "ANSI-C or locale quoting"
        if windows and char == "%":
            return "environment expansion"

        if context == DOUBLE:
            continue

        # Unquoted only from here
        if char in ("<", ">"):
            if next_char == "(":
                return "process substitution"
            return "redirection"
        if char in ("(", ")"):
            return "subshell"
        if char in ("{", "}"):
            return "brace group or expansion"
        if char in ("\n", "\r"):
            return "newline"
        if char == "#" and (not prev_char or prev_char.isspace()):
            return "comment"
        if char == "&" and next_char != "&" and prev_char != "&":
            if prev_char == "|":
                return "stderr pipe (|&)"
            return "background job"
    return None


def _build_segment(
    text: str,
    cwd: str | None,
    env: Mapping[str, str] | None,
) -> ExecCommandSegment | str:
    """Tokenize one pipeline stage; returns a failure reason on error."""
    try:
        argv = shlex.split(text)
    except ValueError as e:
        return f"tokenize error: {e}"
    if not argv:
        return "empty pipeline stage"
    if ENV_ASSIGNMENT.match(argv[0]):
        return "environment assignment"
    return ExecCommandSegment(
        raw=text,
        argv=argv,
        resolution=resolve_command_resolution(argv[0], cwd=cwd, env=env),
    )


def analyze_shell_command(
    command: str,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> ExecCommandAnalysis:
    """Analyze a command into resolved pipeline segments.

    Args:
        command: Command text (a whole command or one chain part).
        cwd: Working directory used to resolve executables.
        env: Environment whose PATH is used to resolve executables.
        platform: Target platform; Windows also rejects ``%VAR%`` expansion.

    Returns:
        ExecCommandAnalysis; ``ok`` is False with a reason if the command
        cannot be modeled safely.
    """
    command = command.strip()
    if not command:
        return ExecCommandAnalysis.failure("empty command")

    if _has_unbalanced_quotes(command):
        return ExecCommandAnalysis.failure("unbalanced quotes")

    unsafe = _find_unsafe_construct(command, windows=is_windows_platform(platform))
    if unsafe:
        return ExecCommandAnalysis.failure(unsafe)

    parts: list[tuple[ExecCommandSegment, ...]] = []
    for part in _split_top_level(command, CHAIN_OPERATORS):
        if not part.strip():
            return ExecCommandAnalysis.failure("empty chain part")

        segments: list[ExecCommandSegment] = []
        for stage in _split_top_level(part, (PIPE_OPERATOR,)):
            segment = _build_segment(stage.strip(), cwd, env)
            if isinstance(segment, str):
                return ExecCommandAnalysis.failure(segment)
            segments.append(segment)
        parts.append(tuple(segments))

    if len(parts) == 1:
        return ExecCommandAnalysis(ok=True, pipeline=SimplePipeline(parts[0]))
    return ExecCommandAnalysis(ok=True, pipeline=ChainedPipeline(tuple(parts)))
