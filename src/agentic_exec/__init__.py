"""Agentic Exec - approval gating for model-initiated shell commands.

Decides, from command text alone, whether a (possibly chained, possibly
piped) shell command is low-risk enough to run without human confirmation:

- Explicit allowlist of trusted executables
- Safe bins: well-known stdin filters checked against usage profiles
- Skill bins: executables shipped by trusted skills
"""

from agentic_exec.approvals import (
    DEFAULT_SAFE_BINS,
    ExecAllowlistAnalysis,
    ExecAllowlistEntry,
    ExecApprovalsConfig,
    ExecApprovalsConfigError,
    SatisfiedBy,
    evaluate_command,
    evaluate_shell_allowlist,
    requires_approval,
    resolve_safe_bins,
)
from agentic_exec.logging import configure_logging, get_logger
from agentic_exec.settings import ExecSettings, get_settings, reload_settings, set_settings

__all__ = [
    "DEFAULT_SAFE_BINS",
    "ExecAllowlistAnalysis",
    "ExecAllowlistEntry",
    "ExecApprovalsConfig",
    "ExecApprovalsConfigError",
    "SatisfiedBy",
    "evaluate_command",
    "evaluate_shell_allowlist",
    "requires_approval",
    "resolve_safe_bins",
    "configure_logging",
    "get_logger",
    "ExecSettings",
    "get_settings",
    "set_settings",
    "reload_settings",
]

__version__ = "0.1.0"
