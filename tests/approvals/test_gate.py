"""Tests for the approval gate entry points."""

from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

from agentic_exec.approvals import (
    ExecAllowlistAnalysis,
    ExecAllowlistEntry,
    ExecApprovalsConfig,
    SatisfiedBy,
    evaluate_command,
    requires_approval,
)
from agentic_exec.approvals import gate
from agentic_exec.settings import ExecSettings, set_settings


def _config(fake_bin_dir: Path, **kwargs) -> ExecApprovalsConfig:
    return ExecApprovalsConfig(trusted_safe_bin_dirs=[str(fake_bin_dir)], **kwargs)


class TestEvaluateCommand:
    """Tests for evaluate_command."""

    def test_safe_pipeline(self, fake_bin_dir: Path, exec_env):
        result = evaluate_command(
            "grep -e foo | wc -l",
            config=_config(fake_bin_dir),
            env=exec_env,
            platform="linux",
        )

        assert result.allowlist_satisfied
        assert result.segment_satisfied_by == [SatisfiedBy.SAFE_BINS, SatisfiedBy.SAFE_BINS]

    def test_config_allowlist_and_skills(self, fake_bin_dir: Path, exec_env):
        config = _config(
            fake_bin_dir,
            allowlist=[ExecAllowlistEntry(pattern=str(fake_bin_dir / "deploy"))],
            skill_bins=["mytool"],
            auto_allow_skills=True,
        )

        result = evaluate_command("deploy && mytool", config=config, env=exec_env, platform="linux")

        assert result.segment_satisfied_by == [SatisfiedBy.ALLOWLIST, SatisfiedBy.SKILLS]

    def test_path_cwd(self, tmp_path: Path, exec_env):
        config = ExecApprovalsConfig(
            allowlist=[ExecAllowlistEntry(pattern=str(tmp_path / "run.sh"))]
        )
        result = evaluate_command("./run.sh", config=config, cwd=tmp_path, env=exec_env, platform="linux")
        assert result.allowlist_satisfied

    def test_loads_default_config(self, tmp_path: Path, fake_bin_dir: Path, exec_env):
        config_file = tmp_path / "approvals.yaml"
        config_file.write_text(f"allowlist: ['{fake_bin_dir}/rm']\n")
        set_settings(ExecSettings(approvals_file=config_file))

        result = evaluate_command("rm -rf build", env=exec_env, platform="linux")

        assert result.segment_satisfied_by == [SatisfiedBy.ALLOWLIST]

    def test_logs_decision(self, fake_bin_dir: Path, exec_env):
        with capture_logs() as logs:
            evaluate_command(
                "head -n 1 && rm -rf /",
                config=_config(fake_bin_dir),
                env=exec_env,
                platform="linux",
            )

        decision = next(log for log in logs if log["event"] == "exec_decision")
        assert decision["auto_approved"] is False
        assert decision["analysis_ok"] is True
        assert decision["satisfied_by"] == ["safeBins", "none"]
        assert decision["command"] == "head -n 1 && rm -rf /"

    def test_logged_command_is_truncated(self, fake_bin_dir: Path, exec_env):
        command = "grep -e " + "a" * 300
        with capture_logs() as logs:
            evaluate_command(command, config=_config(fake_bin_dir), env=exec_env, platform="linux")

        decision = next(log for log in logs if log["event"] == "exec_decision")
        assert decision["command"].endswith("...")
        assert len(decision["command"]) < len(command)

    def test_binds_command_context_during_evaluation(self, monkeypatch):
        """Test that evaluator log events see the command and cwd."""
        seen = {}

        def fake_evaluate(command, **kwargs):
            seen.update(structlog.contextvars.get_contextvars())
            return ExecAllowlistAnalysis.failure()

        monkeypatch.setattr(gate, "evaluate_shell_allowlist", fake_evaluate)

        evaluate_command("grep -e foo", config=ExecApprovalsConfig(), cwd="/srv/app")

        assert seen == {"command": "grep -e foo", "cwd": "/srv/app"}
        assert "command" not in structlog.contextvars.get_contextvars()

    def test_context_unbound_on_error(self, monkeypatch):
        def failing_evaluate(command, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(gate, "evaluate_shell_allowlist", failing_evaluate)

        with pytest.raises(RuntimeError):
            evaluate_command("grep -e foo", config=ExecApprovalsConfig())

        context = structlog.contextvars.get_contextvars()
        assert "command" not in context
        assert "cwd" not in context


class TestRequiresApproval:
    """Tests for requires_approval."""

    def test_safe_command(self, fake_bin_dir: Path, exec_env):
        assert not requires_approval(
            "sort | uniq -c", config=_config(fake_bin_dir), env=exec_env, platform="linux"
        )

    def test_unsafe_command(self, fake_bin_dir: Path, exec_env):
        assert requires_approval(
            "cat ~/.ssh/id_rsa", config=_config(fake_bin_dir), env=exec_env, platform="linux"
        )

    def test_unanalyzable_command(self, fake_bin_dir: Path, exec_env):
        assert requires_approval(
            "grep foo > /etc/hosts", config=_config(fake_bin_dir), env=exec_env, platform="linux"
        )

    def test_merged_config_keeps_safe_bins_opt_out(self, fake_bin_dir: Path, exec_env):
        """Test that a merged-in config cannot switch safe bins back on."""
        base = ExecApprovalsConfig.from_dict(
            {"safe_bins": None, "trusted_safe_bin_dirs": [str(fake_bin_dir)]}
        )
        merged = base.merge_with(ExecApprovalsConfig.from_dict({"skill_bins": ["mytool"]}))

        assert requires_approval("grep -e foo", config=merged, env=exec_env, platform="linux")

    def test_windows(self, fake_bin_dir: Path, exec_env):
        assert requires_approval(
            "grep -e foo", config=_config(fake_bin_dir), env=exec_env, platform="win32"
        )
