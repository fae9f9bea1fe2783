"""Shared test fixtures for lambda_utils.

Provides fixtures for isolating the environment, resetting module-level
singletons (output manager, shared HTTP client, log handler), and running
CLI commands. These fixtures are discovered by pytest automatically.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lambda_utils.client import reset_client
from lambda_utils.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals() -> None:
    """Reset the global OutputManager, shared client, and log handler after every test.

    The OutputManager and the log handler cache references to the streams
    that were current when they were created. When Typer's CliRunner
    swaps those streams during a test, the cached references go stale.
    """
    yield
    reset_output()
    reset_client()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "lambda_utils.handler":
            root.removeHandler(handler)
    for name in ("lambda_utils", "lambda_utils.app", "my_app", "my_app.main"):
        logging.getLogger(name).setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate settings resolution to a temporary directory.

    Clears all LAMBDA_UTILS_* environment variables and changes the
    working directory to tmp_path so no project file leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "LAMBDA_UTILS_USE_CACHE",
        "LAMBDA_UTILS_VERBOSE",
        "LAMBDA_UTILS_CACHE_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
