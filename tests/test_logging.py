"""Tests for structured logging configuration."""

import json

from agentic_exec.logging import (
    Loggers,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from agentic_exec.settings import ExecSettings


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, capsys):
        configure_logging(ExecSettings(log_level="info", log_format="json"))

        get_logger("test").info("exec_decision", auto_approved=True)

        [record] = _json_lines(capsys.readouterr().err)
        assert record["event"] == "exec_decision"
        assert record["auto_approved"] is True
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filtering(self, capsys):
        configure_logging(ExecSettings(log_level="warning", log_format="json"))

        logger = get_logger("test")
        logger.debug("hidden")
        logger.info("hidden")
        logger.warning("shown")

        records = _json_lines(capsys.readouterr().err)
        assert [r["event"] for r in records] == ["shown"]

    def test_console_output(self, capsys):
        configure_logging(ExecSettings(log_level="info", log_format="console"))

        get_logger("test").info("safe_bin_denied", reason="profile_violation")

        err = capsys.readouterr().err
        assert "safe_bin_denied" in err
        assert "profile_violation" in err

    def test_defaults_without_settings(self, capsys):
        configure_logging()

        get_logger().info("hidden")
        get_logger().warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err


class TestLoggingContext:
    """Tests for context binding."""

    def test_bound_context_is_merged(self, capsys):
        configure_logging(ExecSettings(log_level="info", log_format="json"))
        try:
            bind_context(session="s1", cwd="/srv/app")
            unbind_context("cwd")
            get_logger("test").info("exec_decision")
        finally:
            unbind_context("session")

        [record] = _json_lines(capsys.readouterr().err)
        assert record["session"] == "s1"
        assert "cwd" not in record

    def test_unbind_context(self, capsys):
        configure_logging(ExecSettings(log_level="info", log_format="json"))
        bind_context(session="s1")
        unbind_context("session")

        get_logger("test").info("exec_decision")

        [record] = _json_lines(capsys.readouterr().err)
        assert "session" not in record


class TestLoggers:
    """Tests for component loggers."""

    def test_component_loggers(self):
        assert Loggers.approvals() is not None
        assert Loggers.config() is not None
