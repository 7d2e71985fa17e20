#!/usr/bin/env python
"""Standalone demo for exec approvals.

This demo walks through the approval gate:
1. Safe-bin usage profiles
2. Pipelines and chains of safe bins
3. Commands that always need confirmation
4. Allowlist and skill-bin approval
5. Windows policy

Nothing is executed; commands are only evaluated.

Usage:
    python examples/approvals_demo.py
"""

from agentic_exec import configure_logging
from agentic_exec.approvals import (
    SAFE_BIN_PROFILES,
    ExecAllowlistEntry,
    ExecApprovalsConfig,
    evaluate_command,
    resolve_command_resolution,
)
from agentic_exec.settings import ExecSettings


# =============================================================================
# Helpers
# =============================================================================


def show(command: str, config: ExecApprovalsConfig, platform: str = "linux") -> None:
    """Evaluate a command and print the decision."""
    result = evaluate_command(command, config=config, platform=platform)
    decision = "auto-approve" if result.allowlist_satisfied else "ask user"
    print(f"\n  Command: {command}")
    print(f"    Decision: {decision}")
    print(f"    Analysis OK: {result.analysis_ok}")
    print(f"    Satisfied by: {[by.value for by in result.segment_satisfied_by]}")


# =============================================================================
# Demo Functions
# =============================================================================


def demo_profiles():
    """Demo the safe-bin usage profiles."""
    print("\n" + "=" * 60)
    print("Safe-Bin Profiles")
    print("=" * 60)

    for name, profile in SAFE_BIN_PROFILES.items():
        max_positional = "any" if profile.max_positional is None else profile.max_positional
        print(f"\n  {name}: positional {profile.min_positional}..{max_positional}")
        if profile.value_flags:
            print(f"    Value flags: {' '.join(sorted(profile.value_flags))}")
        if profile.blocked_flags:
            print(f"    Blocked flags: {' '.join(sorted(profile.blocked_flags))}")
    print()


def demo_safe_bins(config: ExecApprovalsConfig):
    """Demo commands vouched for by safe bins."""
    print("\n" + "=" * 60)
    print("Safe Bins")
    print("=" * 60)

    show("grep -e foo", config)
    show("sort | uniq -c | head -n 5", config)
    show("grep -e error || wc -l", config)
    print()


def demo_denied(config: ExecApprovalsConfig):
    """Demo commands that need confirmation."""
    print("\n" + "=" * 60)
    print("Needs Confirmation")
    print("=" * 60)

    show("grep -r secret .", config)
    show("head -n 10 && rm -rf /tmp/x", config)
    show("grep foo /etc/passwd", config)
    show("grep $(cat pattern.txt)", config)
    show("sort -o out.txt", config)
    print()


def demo_allowlist_and_skills(config: ExecApprovalsConfig):
    """Demo allowlist entries and skill bins."""
    print("\n" + "=" * 60)
    print("Allowlist and Skills")
    print("=" * 60)

    resolution = resolve_command_resolution("ls")
    if resolution is None or resolution.resolved_path is None:
        print("\n  ls not found on PATH, skipping")
        return

    print(f"\n  Allowlisting {resolution.resolved_path}")
    allowlisted = config.merge_with(
        ExecApprovalsConfig(
            allowlist=[ExecAllowlistEntry(pattern=resolution.resolved_path, id="ls")],
            safe_bins=config.safe_bins,
            skill_bins=["summarize"],
            auto_allow_skills=True,
        )
    )
    show("ls -la", allowlisted)
    show("ls -la | grep -e py", allowlisted)
    show("summarize --short", allowlisted)
    print()


def demo_windows(config: ExecApprovalsConfig):
    """Demo the Windows safe-bin policy."""
    print("\n" + "=" * 60)
    print("Windows Policy")
    print("=" * 60)

    show("grep -e foo", config, platform="linux")
    show("grep -e foo", config, platform="win32")
    print()


def main():
    """Run all demos."""
    configure_logging(ExecSettings(log_level="warning"))

    print("\n" + "#" * 60)
    print("#  Exec Approvals Demo")
    print("#" * 60)

    config = ExecApprovalsConfig()

    demo_profiles()
    demo_safe_bins(config)
    demo_denied(config)
    demo_allowlist_and_skills(config)
    demo_windows(config)

    print("\n" + "#" * 60)
    print("#  Demo Complete!")
    print("#" * 60 + "\n")


if __name__ == "__main__":
    main()
