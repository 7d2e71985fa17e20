"""Data models for exec approval evaluation.

Provides dataclasses for parsed command segments, allowlist entries, and the
decisions produced by the allowlist/safe-bin evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SatisfiedBy(Enum):
    """What allowed a single pipeline segment to run without confirmation."""

    ALLOWLIST = "allowlist"  # Explicit allowlist entry matched
    SAFE_BINS = "safeBins"  # Safe-bin usage profile passed
    SKILLS = "skills"  # Executable belongs to an auto-allowed skill
    NONE = "none"  # Nothing vouched for it


class DenialReason(Enum):
    """Why a segment or command was not auto-approved."""

    ANALYSIS_FAILURE = "analysis_failure"
    PLATFORM_POLICY_DENIED = "platform_policy_denied"
    NO_SAFE_BINS = "no_safe_bins"
    UNRESOLVED_EXECUTABLE = "unresolved_executable"
    NOT_A_SAFE_BIN = "not_a_safe_bin"
    UNTRUSTED_LOCATION = "untrusted_location"
    PROFILE_VIOLATION = "profile_violation"


@dataclass(frozen=True)
class CommandResolution:
    """Resolved executable for one pipeline segment.

    ``executable_name`` keeps the case it was resolved with; safe-bin matching
    lowercases it.
    """

    raw_executable: str  # argv[0] as written
    executable_name: str  # Basename of the executable
    resolved_path: str | None = None  # Absolute path, None if not found


@dataclass
class ExecCommandSegment:
    """One stage of a pipe within a chain part."""

    raw: str  # Source text of this stage
    argv: list[str] = field(default_factory=list)
    resolution: CommandResolution | None = None


@dataclass(frozen=True)
class SimplePipeline:
    """A command with no top-level chain operators."""

    segments: tuple[ExecCommandSegment, ...] = ()


@dataclass(frozen=True)
class ChainedPipeline:
    """A command split on top-level ``&&``, ``||`` or ``;``."""

    parts: tuple[tuple[ExecCommandSegment, ...], ...] = ()


@dataclass(frozen=True)
class ExecCommandAnalysis:
    """Result of analyzing one command (or chain part)."""

    ok: bool
    pipeline: SimplePipeline | ChainedPipeline = SimplePipeline()
    reason: str | None = None  # Why analysis failed

    @classmethod
    def failure(cls, reason: str) -> ExecCommandAnalysis:
        """Build a fail-closed analysis result."""
        return cls(ok=False, reason=reason)

    @property
    def segments(self) -> list[ExecCommandSegment]:
        """All segments, flattened across chain parts."""
        if isinstance(self.pipeline, ChainedPipeline):
            return [segment for part in self.pipeline.parts for segment in part]
        return list(self.pipeline.segments)

    @property
    def chains(self) -> list[list[ExecCommandSegment]] | None:
        """Segments grouped by chain part, or None for a simple pipeline."""
        if isinstance(self.pipeline, ChainedPipeline):
            return [list(part) for part in self.pipeline.parts]
        return None


@dataclass
class ExecAllowlistEntry:
    """A configured, explicitly trusted executable.

    Attributes:
        pattern: Path glob the resolved executable must match.
        id: Optional stable identifier for the entry.
        last_used_at: Epoch milliseconds of the last approved use.
        last_used_command: Command text of the last approved use.
        last_resolved_path: Executable path of the last approved use.
    """

    pattern: str
    id: str | None = None
    last_used_at: int | None = None
    last_used_command: str | None = None
    last_resolved_path: str | None = None


@dataclass
class SegmentsEvaluation:
    """Result of evaluating one pipeline's segments."""

    satisfied: bool
    matches: list[ExecAllowlistEntry] = field(default_factory=list)
    segment_satisfied_by: list[SatisfiedBy] = field(default_factory=list)


@dataclass
class ExecAllowlistEvaluation:
    """Allowlist decision for an analyzed command."""

    allowlist_satisfied: bool
    allowlist_matches: list[ExecAllowlistEntry] = field(default_factory=list)
    segment_satisfied_by: list[SatisfiedBy] = field(default_factory=list)


@dataclass
class ExecAllowlistAnalysis(ExecAllowlistEvaluation):
    """Allowlist decision for raw command text, with analysis diagnostics."""

    analysis_ok: bool = False
    segments: list[ExecCommandSegment] = field(default_factory=list)

    @classmethod
    def failure(cls) -> ExecAllowlistAnalysis:
        """Build the result for a command that could not be analyzed."""
        return cls(allowlist_satisfied=False, analysis_ok=False)
