"""Allowlist evaluation for analyzed shell commands.

Every pipeline segment of every chain part must be vouched for by one of,
in priority order: an allowlist entry, the safe-bin usage gate, or (when
enabled) the skill-bin set. One unvouched segment denies the whole command.
"""

import sys
from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from agentic_exec.approvals.allowlist import match_allowlist
from agentic_exec.approvals.analysis import analyze_shell_command, split_command_chain
from agentic_exec.approvals.models import (
    ChainedPipeline,
    DenialReason,
    ExecAllowlistAnalysis,
    ExecAllowlistEntry,
    ExecAllowlistEvaluation,
    ExecCommandAnalysis,
    ExecCommandSegment,
    SatisfiedBy,
    SegmentsEvaluation,
)
from agentic_exec.approvals.resolution import (
    is_windows_platform,
    resolve_allowlist_candidate_path,
)
from agentic_exec.approvals.safe_bins import is_safe_bin_usage
from agentic_exec.logging import Loggers

logger = Loggers.approvals()


def _satisfied_by(
    segment: ExecCommandSegment,
    allowlist: Sequence[ExecAllowlistEntry],
    safe_bins: frozenset[str],
    cwd: str | None,
    trusted_safe_bin_dirs: Iterable[str] | None,
    skill_bins: frozenset[str] | None,
    platform: str | None,
) -> tuple[SatisfiedBy, ExecAllowlistEntry | None]:
    """Attribute one segment; returns the allowlist match if there was one."""
    resolution = segment.resolution
    candidate_path = resolve_allowlist_candidate_path(resolution, cwd)
    if candidate_path and resolution is not None:
        resolution = replace(resolution, resolved_path=candidate_path)

    match = match_allowlist(allowlist, resolution)
    if match is not None:
        return SatisfiedBy.ALLOWLIST, match

    if is_safe_bin_usage(
        segment.argv,
        segment.resolution,
        safe_bins,
        trusted_safe_bin_dirs=trusted_safe_bin_dirs,
        platform=platform,
    ):
        return SatisfiedBy.SAFE_BINS, None

    executable_name = segment.resolution.executable_name if segment.resolution else None
    if skill_bins and executable_name and executable_name in skill_bins:
        return SatisfiedBy.SKILLS, None

    return SatisfiedBy.NONE, None


def evaluate_segments(
    segments: Sequence[ExecCommandSegment],
    allowlist: Sequence[ExecAllowlistEntry],
    safe_bins: Iterable[str],
    cwd: str | None = None,
    trusted_safe_bin_dirs: Iterable[str] | None = None,
    skill_bins: Iterable[str] | None = None,
    auto_allow_skills: bool = False,
    platform: str | None = None,
) -> SegmentsEvaluation:
    """Evaluate the segments of one pipeline.

    Stops at the first unvouched segment; its NONE attribution is the last
    entry of ``segment_satisfied_by``.

    Args:
        segments: Pipeline segments in order.
        allowlist: Configured allowlist entries.
        safe_bins: Normalized safe-bin names.
        cwd: Working directory for allowlist candidate paths.
        trusted_safe_bin_dirs: Trusted safe-bin directories (None = defaults).
        skill_bins: Executable names belonging to trusted skills.
        auto_allow_skills: Whether skill bins are auto-allowed.
        platform: Target platform (defaults to sys.platform).

    Returns:
        SegmentsEvaluation with the matches and per-segment attribution.
    """
    safe_bins = frozenset(safe_bins)
    allowed_skills = frozenset(skill_bins or ()) if auto_allow_skills else frozenset()
    result = SegmentsEvaluation(satisfied=True)

    for segment in segments:
        by, match = _satisfied_by(
            segment,
            allowlist,
            safe_bins,
            cwd,
            trusted_safe_bin_dirs,
            allowed_skills,
            platform,
        )
        if match is not None:
            result.matches.append(match)
        result.segment_satisfied_by.append(by)
        if by is SatisfiedBy.NONE:
            result.satisfied = False
            break

    return result


def evaluate_exec_allowlist(
    analysis: ExecCommandAnalysis,
    allowlist: Sequence[ExecAllowlistEntry],
    safe_bins: Iterable[str],
    cwd: str | None = None,
    trusted_safe_bin_dirs: Iterable[str] | None = None,
    skill_bins: Iterable[str] | None = None,
    auto_allow_skills: bool = False,
    platform: str | None = None,
) -> ExecAllowlistEvaluation:
    """Evaluate an analyzed command against the allowlist and safe bins.

    A failed or empty analysis is denied. Chain parts are evaluated in
    order; the first unsatisfied part denies the command and discards all
    matches and attributions gathered from earlier parts.
    """
    if not analysis.ok or not analysis.segments:
        return ExecAllowlistEvaluation(allowlist_satisfied=False)

    options = dict(
        allowlist=allowlist,
        safe_bins=frozenset(safe_bins),
        cwd=cwd,
        trusted_safe_bin_dirs=trusted_safe_bin_dirs,
        skill_bins=skill_bins,
        auto_allow_skills=auto_allow_skills,
        platform=platform,
    )

    if isinstance(analysis.pipeline, ChainedPipeline):
        evaluation = ExecAllowlistEvaluation(allowlist_satisfied=True)
        for part in analysis.pipeline.parts:
            result = evaluate_segments(part, **options)
            if not result.satisfied:
                return ExecAllowlistEvaluation(allowlist_satisfied=False)
            evaluation.allowlist_matches.extend(result.matches)
            evaluation.segment_satisfied_by.extend(result.segment_satisfied_by)
        return evaluation

    result = evaluate_segments(analysis.pipeline.segments, **options)
    return ExecAllowlistEvaluation(
        allowlist_satisfied=result.satisfied,
        allowlist_matches=result.matches,
        segment_satisfied_by=result.segment_satisfied_by,
    )


def evaluate_shell_allowlist(
    command: str,
    allowlist: Sequence[ExecAllowlistEntry],
    safe_bins: Iterable[str],
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    trusted_safe_bin_dirs: Iterable[str] | None = None,
    skill_bins: Iterable[str] | None = None,
    auto_allow_skills: bool = False,
    platform: str | None = None,
) -> ExecAllowlistAnalysis:
    """Evaluate raw command text (including ``&&``, ``||``, ``;``).

    Outside Windows the command is first split into chain parts, each
    analyzed and evaluated on its own. A part that cannot be analyzed fails
    the whole command closed; a part that is not satisfied denies it. The
    segments and attributions gathered up to that point are kept for
    diagnostics.

    Args:
        command: Raw command text.
        allowlist: Configured allowlist entries.
        safe_bins: Normalized safe-bin names.
        cwd: Working directory the command would run in.
        env: Environment the command would run with.
        trusted_safe_bin_dirs: Trusted safe-bin directories (None = defaults).
        skill_bins: Executable names belonging to trusted skills.
        auto_allow_skills: Whether skill bins are auto-allowed.
        platform: Target platform (defaults to sys.platform).

    Returns:
        ExecAllowlistAnalysis with the decision and diagnostics.
    """
    platform = platform or sys.platform
    safe_bins = frozenset(safe_bins)
    options = dict(
        allowlist=allowlist,
        safe_bins=safe_bins,
        cwd=cwd,
        trusted_safe_bin_dirs=trusted_safe_bin_dirs,
        skill_bins=skill_bins,
        auto_allow_skills=auto_allow_skills,
        platform=platform,
    )

    chain_parts = None if is_windows_platform(platform) else split_command_chain(command)
    if chain_parts is None:
        analysis = analyze_shell_command(command, cwd=cwd, env=env, platform=platform)
        if not analysis.ok:
            logger.debug(
                "analysis_failed",
                reason=DenialReason.ANALYSIS_FAILURE.value,
                detail=analysis.reason,
            )
            return ExecAllowlistAnalysis.failure()
        evaluation = evaluate_exec_allowlist(analysis, **options)
        return ExecAllowlistAnalysis(
            analysis_ok=True,
            allowlist_satisfied=evaluation.allowlist_satisfied,
            allowlist_matches=evaluation.allowlist_matches,
            segments=analysis.segments,
            segment_satisfied_by=evaluation.segment_satisfied_by,
        )

    result = ExecAllowlistAnalysis(analysis_ok=True, allowlist_satisfied=True)
    for part in chain_parts:
        analysis = analyze_shell_command(part, cwd=cwd, env=env, platform=platform)
        if not analysis.ok:
            logger.debug(
                "analysis_failed",
                reason=DenialReason.ANALYSIS_FAILURE.value,
                detail=analysis.reason,
                part=part,
            )
            result.analysis_ok = False
            result.allowlist_satisfied = False
            return result

        result.segments.extend(analysis.segments)
        evaluation = evaluate_exec_allowlist(analysis, **options)
        result.allowlist_matches.extend(evaluation.allowlist_matches)
        result.segment_satisfied_by.extend(evaluation.segment_satisfied_by)
        if not evaluation.allowlist_satisfied:
            result.allowlist_satisfied = False
            return result

    return result
