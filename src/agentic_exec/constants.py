"""Shared constants for agentic-exec."""

# Command text is truncated to this length in log events
COMMAND_PREVIEW_LENGTH = 200


def truncate(text: str, max_length: int = COMMAND_PREVIEW_LENGTH) -> str:
    """Truncate text with ellipsis if it exceeds max_length."""
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text
