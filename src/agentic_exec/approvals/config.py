"""Configuration for exec approvals.

Provides user-configurable settings for the allowlist, the safe-bin set,
extra trusted safe-bin directories, and skill-bin auto-approval.

Example ``exec_approvals.yaml``::

    allowlist:
      - ~/.local/bin/rg
      - pattern: /opt/homebrew/bin/*
        id: homebrew
    safe_bins: [jq, grep, head]   # omit for defaults, null for none
    trusted_safe_bin_dirs: [/opt/homebrew/bin]
    skill_bins: [summarize]
    auto_allow_skills: true
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from agentic_exec.approvals.models import ExecAllowlistEntry
from agentic_exec.approvals.safe_bins import resolve_safe_bins
from agentic_exec.approvals.trust import resolve_trusted_safe_bin_dirs
from agentic_exec.logging import Loggers

if TYPE_CHECKING:
    from agentic_exec.settings import ExecSettings

logger = Loggers.config()

LOCAL_CONFIG_NAME = "exec_approvals.yaml"


class ExecApprovalsConfigError(Exception):
    """Raised when the approvals configuration is malformed."""

    pass


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ExecApprovalsConfigError(f"'{key}' must be a list of strings")
    return value


def _parse_allowlist_entry(raw: Any) -> ExecAllowlistEntry:
    if isinstance(raw, str):
        return ExecAllowlistEntry(pattern=raw)
    if isinstance(raw, dict) and isinstance(raw.get("pattern"), str):
        return ExecAllowlistEntry(
            pattern=raw["pattern"],
            id=raw.get("id"),
            last_used_at=raw.get("last_used_at"),
            last_used_command=raw.get("last_used_command"),
            last_resolved_path=raw.get("last_resolved_path"),
        )
    raise ExecApprovalsConfigError(
        f"Allowlist entries must be strings or mappings with a 'pattern': {raw!r}"
    )


@dataclass
class ExecApprovalsConfig:
    """Configuration for exec approvals.

    Attributes:
        allowlist: Explicitly trusted executables.
        safe_bins: Normalized safe-bin names. None (not configured) resolves
            to DEFAULT_SAFE_BINS; an empty set disables safe bins.
        trusted_safe_bin_dirs: Trusted directories in addition to the defaults.
        skill_bins: Executable names provided by trusted skills.
        auto_allow_skills: Whether skill bins run without confirmation.
        safe_bins_configured: Whether safe_bins was set explicitly rather
            than defaulted.
    """

    allowlist: list[ExecAllowlistEntry] = field(default_factory=list)
    safe_bins: frozenset[str] | None = None
    trusted_safe_bin_dirs: list[str] = field(default_factory=list)
    skill_bins: list[str] = field(default_factory=list)
    auto_allow_skills: bool = False
    safe_bins_configured: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if self.safe_bins is None:
            self.safe_bins = resolve_safe_bins()
        else:
            self.safe_bins = frozenset(self.safe_bins)
            self.safe_bins_configured = True

    @property
    def effective_trusted_safe_bin_dirs(self) -> frozenset[str]:
        """Default trusted directories plus the configured extras."""
        return resolve_trusted_safe_bin_dirs(self.trusted_safe_bin_dirs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExecApprovalsConfig":
        """Create config from dictionary.

        A missing ``safe_bins`` key means the default set; an explicit
        null means no safe bins at all.

        Args:
            data: Configuration dictionary.

        Returns:
            ExecApprovalsConfig instance.

        Raises:
            ExecApprovalsConfigError: If a value has the wrong shape.
        """
        raw_allowlist = data.get("allowlist") or []
        if not isinstance(raw_allowlist, list):
            raise ExecApprovalsConfigError("'allowlist' must be a list")

        if "safe_bins" in data:
            raw_safe_bins = data["safe_bins"]
            if raw_safe_bins is not None and not isinstance(raw_safe_bins, list):
                raise ExecApprovalsConfigError("'safe_bins' must be a list or null")
            safe_bins = resolve_safe_bins(raw_safe_bins)
        else:
            safe_bins = None

        auto_allow_skills = data.get("auto_allow_skills", False)
        if not isinstance(auto_allow_skills, bool):
            raise ExecApprovalsConfigError("'auto_allow_skills' must be a boolean")

        return cls(
            allowlist=[_parse_allowlist_entry(entry) for entry in raw_allowlist],
            safe_bins=safe_bins,
            trusted_safe_bin_dirs=_string_list(data, "trusted_safe_bin_dirs"),
            skill_bins=_string_list(data, "skill_bins"),
            auto_allow_skills=auto_allow_skills,
        )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ExecApprovalsConfig":
        """Load config from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ExecApprovalsConfig instance (defaults if the file does not exist).

        Raises:
            ExecApprovalsConfigError: If the file cannot be read or parsed.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ExecApprovalsConfigError(f"Cannot load {path}: {e}") from e

        if not isinstance(data, dict):
            raise ExecApprovalsConfigError(f"{path} must contain a mapping")

        logger.debug("approvals_config_loaded", path=str(path))
        return cls.from_dict(data)

    @classmethod
    def load_default(cls, settings: "ExecSettings | None" = None) -> "ExecApprovalsConfig":
        """Load configuration from default location.

        Looks for config in:
        1. settings.approvals_file (~/.config/agentic-exec/exec_approvals.yaml)
        2. ./exec_approvals.yaml (project local)

        Returns:
            ExecApprovalsConfig instance.
        """
        if settings is None:
            from agentic_exec.settings import get_settings

            settings = get_settings()

        if settings.approvals_file.exists():
            return cls.from_yaml(settings.approvals_file)

        local_config = Path(LOCAL_CONFIG_NAME)
        if local_config.exists():
            return cls.from_yaml(local_config)

        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary.

        ``safe_bins`` is only written when it was set explicitly, so a
        defaulted set stays defaulted after a reload.
        """
        data: dict[str, Any] = {
            "allowlist": [
                {k: v for k, v in vars(entry).items() if v is not None}
                for entry in self.allowlist
            ],
            "trusted_safe_bin_dirs": list(self.trusted_safe_bin_dirs),
            "skill_bins": list(self.skill_bins),
            "auto_allow_skills": self.auto_allow_skills,
        }
        if self.safe_bins_configured:
            data["safe_bins"] = sorted(self.safe_bins)
        return data

    def merge_with(self, other: "ExecApprovalsConfig") -> "ExecApprovalsConfig":
        """Merge this config with another (other takes precedence).

        Allowlists and directory/skill lists are combined. The skills switch
        comes from ``other``, and so does the safe-bin set when ``other`` sets
        it explicitly; otherwise this config's set is kept.

        Args:
            other: Config to merge with (takes precedence).

        Returns:
            New merged config.
        """
        patterns = {entry.pattern for entry in self.allowlist}
        return ExecApprovalsConfig(
            allowlist=self.allowlist
            + [entry for entry in other.allowlist if entry.pattern not in patterns],
            safe_bins=self._merged_safe_bins(other),
            trusted_safe_bin_dirs=list(
                dict.fromkeys(self.trusted_safe_bin_dirs + other.trusted_safe_bin_dirs)
            ),
            skill_bins=list(dict.fromkeys(self.skill_bins + other.skill_bins)),
            auto_allow_skills=other.auto_allow_skills,
        )

    def _merged_safe_bins(self, other: "ExecApprovalsConfig") -> frozenset[str] | None:
        if other.safe_bins_configured:
            return other.safe_bins
        if self.safe_bins_configured:
            return self.safe_bins
        return None
