from __future__ import annotations

import os
from pathlib import Path

import pytest

from quill.config import (
    PROJECT_CONFIG_NAME,
    QuillConfig,
    get_user_config_path,
    load_config,
)
from quill.exceptions import ConfigError


def write_user_config(home: Path, content: str) -> Path:
    user_config_dir = home / ".config" / "quill"
    user_config_dir.mkdir(parents=True)
    path = user_config_dir / "config.yaml"
    path.write_text(content)
    return path


def test_load_defaults_when_no_config(isolated_home: Path) -> None:
    """Test that defaults are used when no config file exists."""
    config = load_config()
    assert isinstance(config, QuillConfig)
    assert config.diagnostics.context_size == 8
    assert config.render.strict_variables is False
    assert config.render.newline == ""
    assert config.verbosity == "warning"


def test_load_project_config(isolated_home: Path, sample_config_yaml: str) -> None:
    """Test loading configuration from quill.yaml."""
    (isolated_home / PROJECT_CONFIG_NAME).write_text(sample_config_yaml)

    config = load_config()
    assert config.diagnostics.context_size == 4
    assert config.render.strict_variables is True
    assert config.render.newline == "\n"
    assert config.verbosity == "info"


def test_load_explicit_config_path(isolated_home: Path) -> None:
    """Test that an explicit path replaces ./quill.yaml."""
    (isolated_home / PROJECT_CONFIG_NAME).write_text("verbosity: info\n")
    custom = isolated_home / "custom.yaml"
    custom.write_text("verbosity: debug\n")

    assert load_config(custom).verbosity == "debug"
    # The explicit path does not leak into later loads
    assert load_config().verbosity == "info"


def test_missing_explicit_config_uses_defaults(isolated_home: Path) -> None:
    config = load_config(isolated_home / "nonexistent.yaml")
    assert config.diagnostics.context_size == 8


def test_empty_config_file_uses_defaults(isolated_home: Path) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text("")
    assert load_config().verbosity == "warning"


def test_env_var_overrides(isolated_home: Path) -> None:
    """Test that QUILL_* environment variables override config files."""
    (isolated_home / PROJECT_CONFIG_NAME).write_text(
        "diagnostics:\n  context_size: 4\nrender:\n  strict_variables: true\n"
    )
    os.environ["QUILL_DIAGNOSTICS__CONTEXT_SIZE"] = "12"
    os.environ["QUILL_VERBOSITY"] = "error"

    config = load_config()
    assert config.diagnostics.context_size == 12
    assert config.render.strict_variables is True
    assert config.verbosity == "error"


def test_load_user_config(isolated_home: Path) -> None:
    """Test loading user configuration from ~/.config/quill/config.yaml."""
    write_user_config(isolated_home, "render:\n  newline: \"\\r\\n\"\n")

    config = load_config()
    assert config.render.newline == "\r\n"


def test_project_config_overrides_user_config(isolated_home: Path) -> None:
    write_user_config(
        isolated_home,
        "diagnostics:\n  context_size: 20\nverbosity: debug\n",
    )
    (isolated_home / PROJECT_CONFIG_NAME).write_text("verbosity: info\n")

    config = load_config()
    assert config.verbosity == "info"
    # user config still applies for values the project does not set
    assert config.diagnostics.context_size == 20


def test_user_config_path(isolated_home: Path) -> None:
    assert get_user_config_path() == isolated_home / ".config" / "quill" / "config.yaml"


def test_unknown_keys_ignored(isolated_home: Path) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text(
        "verbosity: info\nunknown_section:\n  foo: bar\n"
    )
    assert load_config().verbosity == "info"


@pytest.mark.parametrize("size", [0, 81, -1])
def test_invalid_context_size_raises_config_error(isolated_home: Path, size: int) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text(
        f"diagnostics:\n  context_size: {size}\n"
    )

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    assert exc_info.value.field == "diagnostics.context_size"
    assert exc_info.value.value == size


def test_invalid_newline_raises_config_error(isolated_home: Path) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text('render:\n  newline: "--"\n')

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    assert exc_info.value.field == "render.newline"


def test_invalid_verbosity_raises_config_error(isolated_home: Path) -> None:
    os.environ["QUILL_VERBOSITY"] = "loud"

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    assert exc_info.value.field == "verbosity"


def test_invalid_yaml_raises_config_error(isolated_home: Path) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text("render: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config()


def test_non_mapping_yaml_raises_config_error(isolated_home: Path) -> None:
    (isolated_home / PROJECT_CONFIG_NAME).write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config()
