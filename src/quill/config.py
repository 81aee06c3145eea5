from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from quill.diagnostics import DEFAULT_CONTEXT_SIZE
from quill.exceptions import ConfigError
from quill.logging import get_logger

__all__ = [
    "QuillConfig",
    "DiagnosticsConfig",
    "RenderConfig",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "quill.yaml"


class DiagnosticsConfig(BaseModel):
    """Settings for parse error diagnostics.

    Attributes:
        context_size: Characters of template text shown on each side of the
            failing character in parse error snippets.
    """

    context_size: int = Field(default=DEFAULT_CONTEXT_SIZE, ge=1, le=80)


class RenderConfig(BaseModel):
    """Settings for the ``quill render`` command.

    Attributes:
        strict_variables: Warn about variables referenced by the template
            but missing from the supplied variables.
        newline: Text appended after the rendered output.
    """

    strict_variables: bool = False
    newline: str = ""

    @field_validator("newline")
    @classmethod
    def check_newline(cls, v: str) -> str:
        """Only allow line terminators as trailing text."""
        if v not in ("", "\n", "\r\n"):
            raise ValueError("newline must be '', '\\n' or '\\r\\n'")
        return v


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning(
                            f"Config file {yaml_file} is empty, using defaults."
                        )
                    elif isinstance(loaded, dict):
                        self._config_data = loaded
                    else:
                        raise ConfigError(
                            message=f"Config file {yaml_file} must contain a mapping",
                            field=None,
                            value=type(loaded).__name__,
                        )
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class QuillConfig(BaseSettings):
    """Root configuration object containing all Quill settings."""

    model_config = SettingsConfigDict(
        env_prefix="QUILL_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    # Set by load_config() before instantiation; read by
    # settings_customise_sources() which pydantic calls as a classmethod.
    _project_config_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init arguments
        2. Environment variables (QUILL_*)
        3. Project YAML config (./quill.yaml or the path given to load_config)
        4. User YAML config (~/.config/quill/config.yaml)
        5. Defaults
        """
        project_config_path = cls._project_config_path or (
            Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/quill/config.yaml
    """
    return Path.home() / ".config" / "quill" / "config.yaml"


def load_config(config_path: Path | None = None) -> QuillConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to project config file. Defaults to ./quill.yaml

    Returns:
        QuillConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_NAME

    if not config_path.exists():
        logger.info("No project configuration found, using defaults.")

    QuillConfig._project_config_path = config_path
    try:
        return QuillConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        QuillConfig._project_config_path = None
