"""Tests for shell command analysis and chain splitting."""

from pathlib import Path

import pytest

from agentic_exec.approvals import (
    ChainedPipeline,
    ExecCommandAnalysis,
    SimplePipeline,
    analyze_shell_command,
    split_command_chain,
)


class TestSplitCommandChain:
    """Tests for top-level chain splitting."""

    def test_all_operators(self):
        assert split_command_chain("a && b || c ; d") == ["a", "b", "c", "d"]

    def test_no_spaces(self):
        assert split_command_chain("a;b") == ["a", "b"]

    def test_no_chain(self):
        assert split_command_chain("grep foo | head") is None
        assert split_command_chain("grep foo") is None

    def test_quoted_operators_do_not_split(self):
        assert split_command_chain("grep 'a && b'") is None
        assert split_command_chain('grep "a; b"') is None
        assert split_command_chain("grep a\\;b") is None

    def test_empty_part(self):
        assert split_command_chain("a &&") is None
        assert split_command_chain("; a") is None
        assert split_command_chain("a && && b") is None


class TestAnalyzeShellCommand:
    """Tests for successful analysis."""

    def test_pipeline(self, fake_bin_dir: Path, exec_env):
        analysis = analyze_shell_command("grep foo | head -n 5", env=exec_env)

        assert analysis.ok
        assert isinstance(analysis.pipeline, SimplePipeline)
        assert analysis.chains is None
        assert [s.argv for s in analysis.segments] == [["grep", "foo"], ["head", "-n", "5"]]
        assert analysis.segments[0].raw == "grep foo"
        assert analysis.segments[0].resolution.resolved_path == str(fake_bin_dir / "grep")

    def test_chain(self, exec_env):
        analysis = analyze_shell_command("head -n 1 && tail -n 1 | wc -l", env=exec_env)

        assert analysis.ok
        assert isinstance(analysis.pipeline, ChainedPipeline)
        assert [[s.argv[0] for s in part] for part in analysis.chains] == [
            ["head"],
            ["tail", "wc"],
        ]
        assert len(analysis.segments) == 3

    def test_quoted_arguments(self, exec_env):
        analysis = analyze_shell_command("grep 'a b' \"c d\"", env=exec_env)
        assert analysis.segments[0].argv == ["grep", "a b", "c d"]

    def test_single_quotes_keep_dollar_literal(self, exec_env):
        analysis = analyze_shell_command("grep '$HOME'", env=exec_env)
        assert analysis.ok
        assert analysis.segments[0].argv == ["grep", "$HOME"]

    def test_escaped_dollar(self, exec_env):
        analysis = analyze_shell_command("grep \\$HOME", env=exec_env)
        assert analysis.ok
        assert analysis.segments[0].argv == ["grep", "$HOME"]

    def test_hash_inside_word(self, exec_env):
        analysis = analyze_shell_command("grep a#b", env=exec_env)
        assert analysis.ok

    def test_unresolved_executable(self, exec_env):
        analysis = analyze_shell_command("missing-tool --flag", env=exec_env)
        assert analysis.ok
        assert analysis.segments[0].resolution.resolved_path is None


class TestAnalysisFailures:
    """Tests for constructs that fail analysis closed."""

    @pytest.mark.parametrize(
        "command,reason",
        [
            ("grep `id`", "command substitution (`...`)"),
            ("grep $(id)", "command substitution ($(...))"),
            ('grep "$(id)"', "command substitution ($(...))"),
            ("grep $HOME", "parameter expansion"),
            ("grep ${HOME}", "parameter expansion"),
            ('grep "$HOME"', "parameter expansion"),
            ("grep $'\\x41'", "ANSI-C or locale quoting"),
            ("grep foo < input", "redirection"),
            ("grep foo > out", "redirection"),
            ("grep foo 2>&1", "redirection"),
            ("diff <(ls) b", "process substitution"),
            ("(ls)", "subshell"),
            ("{ ls; }", "brace group or expansion"),
            ("grep {a,b}", "brace group or expansion"),
            ("grep a\ngrep b", "newline"),
            ("grep a \\\n b", "line continuation"),
            ("grep a # trailing", "comment"),
            ("sleep 1 &", "background job"),
            ("grep a |& head", "stderr pipe (|&)"),
            ("grep 'a", "unbalanced quotes"),
            ('grep "a', "unbalanced quotes"),
        ],
    )
    def test_unsafe_constructs(self, command, reason):
        analysis = analyze_shell_command(command)
        assert not analysis.ok
        assert analysis.reason == reason
        assert analysis.segments == []

    def test_empty_command(self):
        assert analyze_shell_command("   ").reason == "empty command"

    def test_empty_pipeline_stage(self):
        assert analyze_shell_command("grep foo |").reason == "empty pipeline stage"

    def test_empty_chain_part(self):
        assert analyze_shell_command("grep a && && grep b").reason == "empty chain part"

    def test_environment_assignment(self):
        analysis = analyze_shell_command("LD_PRELOAD=x.so grep foo")
        assert analysis.reason == "environment assignment"

    def test_windows_percent_expansion(self, exec_env):
        """Test that %VAR% is only rejected for Windows targets."""
        assert analyze_shell_command("grep %PATH%", env=exec_env, platform="linux").ok
        windows = analyze_shell_command("grep %PATH%", env=exec_env, platform="win32")
        assert windows.reason == "environment expansion"

    def test_windows_percent_inside_double_quotes(self):
        analysis = analyze_shell_command('grep "%PATH%"', platform="win32")
        assert analysis.reason == "environment expansion"

    def test_failure_result_shape(self):
        assert ExecCommandAnalysis.failure("x") == ExecCommandAnalysis(ok=False, reason="x")
