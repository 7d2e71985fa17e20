"""Approval gate for tool-initiated shell commands.

Wraps evaluate_shell_allowlist with configuration loading and decision
logging. Commands that are not auto-approved must go to a human.
"""

from pathlib import Path
from typing import Mapping

from agentic_exec.approvals.config import ExecApprovalsConfig
from agentic_exec.approvals.evaluator import evaluate_shell_allowlist
from agentic_exec.approvals.models import ExecAllowlistAnalysis
from agentic_exec.constants import truncate
from agentic_exec.logging import Loggers, bind_context, unbind_context

logger = Loggers.approvals()


def evaluate_command(
    command: str,
    config: ExecApprovalsConfig | None = None,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> ExecAllowlistAnalysis:
    """Decide whether a command may run without confirmation.

    Args:
        command: Raw command text from the model.
        config: Approvals config (defaults to ExecApprovalsConfig.load_default()).
        cwd: Working directory the command would run in.
        env: Environment the command would run with.
        platform: Target platform (defaults to sys.platform).

    Returns:
        ExecAllowlistAnalysis; ``allowlist_satisfied`` is the decision.
    """
    if config is None:
        config = ExecApprovalsConfig.load_default()

    cwd = str(cwd) if cwd is not None else None
    # Evaluator events (safe_bin_denied, analysis_failed) carry the command
    bind_context(command=truncate(command), cwd=cwd)
    try:
        result = evaluate_shell_allowlist(
            command,
            allowlist=config.allowlist,
            safe_bins=config.safe_bins,
            cwd=cwd,
            env=env,
            trusted_safe_bin_dirs=config.effective_trusted_safe_bin_dirs,
            skill_bins=config.skill_bins,
            auto_allow_skills=config.auto_allow_skills,
            platform=platform,
        )
    finally:
        unbind_context("command", "cwd")

    logger.info(
        "exec_decision",
        command=truncate(command),
        auto_approved=result.allowlist_satisfied,
        analysis_ok=result.analysis_ok,
        satisfied_by=[by.value for by in result.segment_satisfied_by],
    )
    return result


def requires_approval(
    command: str,
    config: ExecApprovalsConfig | None = None,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> bool:
    """Check if a command needs explicit human confirmation."""
    return not evaluate_command(
        command, config=config, cwd=cwd, env=env, platform=platform
    ).allowlist_satisfied
