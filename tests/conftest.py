from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    This fixture runs automatically for all tests to ensure logging
    is properly configured to output to stderr (not stdout) and
    suppress verbose log output during tests.
    """
    from quill.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all QUILL_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("QUILL_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def isolated_home(
    temp_dir: Path, clean_env: None, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Run in an empty temp dir with HOME pointing at it.

    No project or user config is visible unless the test writes one.
    """
    os.chdir(temp_dir)
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    return temp_dir


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample quill.yaml content for testing."""
    return """
diagnostics:
  context_size: 4

render:
  strict_variables: true
  newline: "\\n"

verbosity: "info"
"""


@pytest.fixture
def planets() -> list[dict[str, Any]]:
    """Planet records used by the end-to-end templates."""
    return [
        {"Name": "Mercury", "Moons": []},
        {"Name": "Venus", "Moons": []},
        {"Name": "Earth", "Moons": ["Moon"]},
        {"Name": "Mars", "Moons": ["Phobos", "Deimos"]},
    ]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from quill.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()
