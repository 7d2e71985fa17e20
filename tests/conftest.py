"""Shared test fixtures for agentic-exec tests.

Provides:
- A temporary bin directory with stub executables, so resolution does not
  depend on what the host has installed
- An environment whose PATH points only at that directory
- Evaluation options trusting that directory as a safe-bin location
- Isolation of the global settings singleton and structlog configuration
"""

import os
from pathlib import Path
from typing import Any, Generator
from unittest.mock import patch

import pytest
import structlog

from agentic_exec.approvals import resolve_safe_bins
from agentic_exec.settings import reload_settings

STUB_EXECUTABLES = (
    "grep",
    "head",
    "tail",
    "jq",
    "tr",
    "wc",
    "sort",
    "cut",
    "uniq",
    "cat",
    "rm",
    "mytool",
    "deploy",
)


def make_executable(directory: Path, name: str) -> Path:
    """Create an executable stub script."""
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def fake_bin_dir(tmp_path: Path) -> Path:
    """Fixture providing a directory of stub executables."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    for name in STUB_EXECUTABLES:
        make_executable(bin_dir, name)
    return bin_dir


@pytest.fixture
def exec_env(fake_bin_dir: Path) -> dict[str, str]:
    """Fixture providing an environment that only sees the stub bin dir."""
    return {"PATH": str(fake_bin_dir)}


@pytest.fixture
def eval_options(fake_bin_dir: Path, exec_env: dict[str, str]) -> dict[str, Any]:
    """Fixture providing evaluate_shell_allowlist options for a POSIX host."""
    return {
        "allowlist": [],
        "safe_bins": resolve_safe_bins(),
        "env": exec_env,
        "trusted_safe_bin_dirs": [str(fake_bin_dir)],
        "platform": "linux",
    }


@pytest.fixture(autouse=True)
def isolated_settings() -> Generator[None, None, None]:
    """Keep AGENTIC_EXEC_* variables and cached settings out of tests."""
    clean_env = {
        k: v for k, v in os.environ.items() if not k.startswith("AGENTIC_EXEC_")
    }
    with patch.dict(os.environ, clean_env, clear=True):
        reload_settings()
        yield
    reload_settings()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
