"""Argument vector validation against a safe-bin profile."""

from agentic_exec.approvals.profiles import SafeBinProfile
from agentic_exec.approvals.tokens import (
    STDIN_TOKEN,
    has_glob_token,
    is_safe_literal_token,
)

END_OF_OPTIONS = "--"


def _is_safe_value(value: str | None) -> bool:
    """A flag value must be present, non-empty and a safe literal."""
    return bool(value) and is_safe_literal_token(value)


def validate_safe_bin_argv(args: list[str], profile: SafeBinProfile) -> bool:
    """Validate a command's arguments (argv without argv[0]) against a profile.

    Tokens are scanned left to right:

    - ``--`` ends flag parsing; every later token except ``-`` is positional.
    - ``-`` means stdin and is skipped.
    - Non-flag tokens are positional and must be safe literals.
    - ``--name[=value]`` is rejected if blocked; inline values and values
      consumed by value flags must be safe literals.
    - ``-abc`` clusters are split into short flags; the first value flag
      consumes the rest of the cluster or the next token.

    Args:
        args: Arguments following the executable.
        profile: The profile to validate against.

    Returns:
        True if every token is admissible and positional bounds hold.
    """
    positional: list[str] = []
    i = 0

    while i < len(args):
        token = args[i]

        if not token:
            i += 1
            continue

        if token == END_OF_OPTIONS:
            for rest in args[i + 1 :]:
                if not rest or rest == STDIN_TOKEN:
                    continue
                if not is_safe_literal_token(rest):
                    return False
                positional.append(rest)
            break

        if token == STDIN_TOKEN:
            i += 1
            continue

        if not token.startswith("-"):
            if not is_safe_literal_token(token):
                return False
            positional.append(token)
            i += 1
            continue

        if token.startswith("--"):
            eq_index = token.find("=")
            flag = token[:eq_index] if eq_index > 0 else token
            if flag in profile.blocked_flags:
                return False
            if eq_index > 0:
                if not is_safe_literal_token(token[eq_index + 1 :]):
                    return False
            elif flag in profile.value_flags:
                value = args[i + 1] if i + 1 < len(args) else None
                if not _is_safe_value(value):
                    return False
                i += 1
            i += 1
            continue

        # Short flag cluster, e.g. -in5
        consumed_value = False
        for j in range(1, len(token)):
            flag = f"-{token[j]}"
            if flag in profile.blocked_flags:
                return False
            if flag not in profile.value_flags:
                continue
            inline_value = token[j + 1 :]
            if inline_value:
                if not is_safe_literal_token(inline_value):
                    return False
            else:
                value = args[i + 1] if i + 1 < len(args) else None
                if not _is_safe_value(value):
                    return False
                i += 1
            consumed_value = True
            break

        if not consumed_value and has_glob_token(token):
            return False
        i += 1

    if len(positional) < profile.min_positional:
        return False
    if profile.max_positional is not None and len(positional) > profile.max_positional:
        return False
    return True
