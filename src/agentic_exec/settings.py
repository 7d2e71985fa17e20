"""Process settings for agentic exec.

Settings Loading Priority (highest to lowest):
    1. Constructor arguments
    2. Environment variables (AGENTIC_EXEC_* prefix)
    3. .env file
    4. Default values

These settings only cover plumbing (logging, where the approvals policy file
lives). The policy itself is loaded by ``ExecApprovalsConfig``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DEFAULT_APPROVALS_FILE",
    "ExecSettings",
    "get_settings",
    "set_settings",
    "reload_settings",
]

DEFAULT_APPROVALS_FILE = Path.home() / ".config" / "agentic-exec" / "exec_approvals.yaml"


class ExecSettings(BaseSettings):
    """Settings for the exec approval runtime."""

    model_config = SettingsConfigDict(
        env_prefix="AGENTIC_EXEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        title="Log Level",
        description="Logging verbosity level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="Log output format (console for dev, json for production)",
    )
    approvals_file: Path = Field(
        default=DEFAULT_APPROVALS_FILE,
        title="Approvals File",
        description="YAML file holding the allowlist and safe-bin policy",
    )

    @field_validator("approvals_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Expand ~ in paths."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


_settings_instance: ExecSettings | None = None


def get_settings() -> ExecSettings:
    """Get the process settings, creating them on first access."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = ExecSettings()
    return _settings_instance


def set_settings(settings: ExecSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally
    """
    global _settings_instance
    _settings_instance = settings


def reload_settings() -> ExecSettings:
    """Drop the cached settings and load them again."""
    global _settings_instance
    _settings_instance = None
    return get_settings()
