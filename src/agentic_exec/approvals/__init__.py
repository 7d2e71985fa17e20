"""Exec approvals: decide whether a shell command may skip human confirmation.

Layers, leaves first:
- Token classification (safe literal / glob / path)
- Safe-bin profile registry
- Argv validation against a profile
- Safe-bin usage gate (platform, membership, trust boundary, profile)
- Segment/chain evaluation against the allowlist, safe bins and skill bins
- Safe-bin set normalization from configuration

Usage:
    from agentic_exec.approvals import evaluate_shell_allowlist, resolve_safe_bins

    result = evaluate_shell_allowlist(
        "grep -e foo | head -n 5",
        allowlist=[],
        safe_bins=resolve_safe_bins(),
    )
    if not result.allowlist_satisfied:
        # Ask the user before running
        ...

    # Chains are denied as a whole if any part is not vouched for
    result = evaluate_shell_allowlist(
        "head -n 10 && rm -rf /tmp/x",
        allowlist=[],
        safe_bins=resolve_safe_bins(),
    )
    # result.allowlist_satisfied == False
"""

from agentic_exec.approvals.allowlist import match_allowlist
from agentic_exec.approvals.analysis import analyze_shell_command, split_command_chain
from agentic_exec.approvals.argv import validate_safe_bin_argv
from agentic_exec.approvals.config import ExecApprovalsConfig, ExecApprovalsConfigError
from agentic_exec.approvals.evaluator import (
    evaluate_exec_allowlist,
    evaluate_segments,
    evaluate_shell_allowlist,
)
from agentic_exec.approvals.gate import evaluate_command, requires_approval
from agentic_exec.approvals.models import (
    ChainedPipeline,
    CommandResolution,
    DenialReason,
    ExecAllowlistAnalysis,
    ExecAllowlistEntry,
    ExecAllowlistEvaluation,
    ExecCommandAnalysis,
    ExecCommandSegment,
    SatisfiedBy,
    SegmentsEvaluation,
    SimplePipeline,
)
from agentic_exec.approvals.profiles import (
    SAFE_BIN_GENERIC_PROFILE,
    SAFE_BIN_PROFILES,
    SafeBinProfile,
    get_safe_bin_profile,
)
from agentic_exec.approvals.resolution import (
    is_windows_platform,
    resolve_allowlist_candidate_path,
    resolve_command_resolution,
)
from agentic_exec.approvals.safe_bins import (
    DEFAULT_SAFE_BINS,
    SAFE_BIN_GUARDS,
    check_safe_bin_usage,
    is_safe_bin_usage,
    normalize_safe_bins,
    resolve_safe_bins,
)
from agentic_exec.approvals.tokens import (
    has_glob_token,
    is_path_like_token,
    is_safe_literal_token,
)
from agentic_exec.approvals.trust import (
    DEFAULT_TRUSTED_SAFE_BIN_DIRS,
    is_trusted_safe_bin_path,
    resolve_trusted_safe_bin_dirs,
)

__all__ = [
    # Entry points
    "evaluate_command",
    "requires_approval",
    "evaluate_shell_allowlist",
    "evaluate_exec_allowlist",
    "evaluate_segments",
    # Safe bins
    "DEFAULT_SAFE_BINS",
    "SAFE_BIN_GUARDS",
    "normalize_safe_bins",
    "resolve_safe_bins",
    "check_safe_bin_usage",
    "is_safe_bin_usage",
    "validate_safe_bin_argv",
    "SafeBinProfile",
    "SAFE_BIN_PROFILES",
    "SAFE_BIN_GENERIC_PROFILE",
    "get_safe_bin_profile",
    # Token classification
    "has_glob_token",
    "is_path_like_token",
    "is_safe_literal_token",
    # Analysis and resolution
    "analyze_shell_command",
    "split_command_chain",
    "resolve_command_resolution",
    "resolve_allowlist_candidate_path",
    "is_windows_platform",
    "match_allowlist",
    "DEFAULT_TRUSTED_SAFE_BIN_DIRS",
    "is_trusted_safe_bin_path",
    "resolve_trusted_safe_bin_dirs",
    # Configuration
    "ExecApprovalsConfig",
    "ExecApprovalsConfigError",
    # Data models
    "ChainedPipeline",
    "CommandResolution",
    "DenialReason",
    "ExecAllowlistAnalysis",
    "ExecAllowlistEntry",
    "ExecAllowlistEvaluation",
    "ExecCommandAnalysis",
    "ExecCommandSegment",
    "SatisfiedBy",
    "SegmentsEvaluation",
    "SimplePipeline",
]
