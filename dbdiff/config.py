"""Configuration loading for the dbdiff command line.

Settings come from, lowest precedence first:

1. built-in defaults
2. a JSON file (``appsettings.json`` in the working directory, or ``--config``)
3. ``DBDIFF_``-prefixed environment variables using ``__`` between section and
   key, e.g. ``DBDIFF_ConnectionStrings__Default``

Command-line options override all of these. Environment variable names are
matched case-insensitively; keys in the JSON file use the section and key
names shown below.

Example ``appsettings.json``::

    {
      "ConnectionStrings": {"Default": "Server=localhost;Database=Shop;Trusted_Connection=true"},
      "Export": {"OutputPath": "schemas/shop.txt", "IgnorePosition": false},
      "Logging": {"LogPath": "logs/dbdiff.log", "Level": "INFO"}
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
)

from dbdiff.errors import InputValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "appsettings.json"
ENV_PREFIX = "DBDIFF_"
ENV_NESTED_DELIMITER = "__"
DEFAULT_OUTPUT_PATH = "schema.txt"
DEFAULT_LOG_PATH = "logs/dbdiff.log"

# Field names mirror the appsettings.json sections and the DBDIFF_Section__Key variables


class ConnectionStringsSection(BaseModel):
    """Named connection strings"""

    model_config = ConfigDict(extra="ignore")

    Default: str | None = Field(default=None, description="Connection string used by default")


class ExportSection(BaseModel):
    """Export defaults"""

    model_config = ConfigDict(extra="ignore")

    OutputPath: str | None = Field(default=None, description="Output file path")
    DatabaseType: str | None = Field(default=None, description="Engine token")
    IgnorePosition: bool = Field(default=False, description="Hide ordinal positions")
    ExcludeViewDefinitions: bool = Field(default=False, description="Hide view SQL definitions")


class LoggingSection(BaseModel):
    """Log file settings"""

    model_config = ConfigDict(extra="ignore")

    LogPath: str = Field(default=DEFAULT_LOG_PATH, description="Log file path")
    Level: str = Field(default="INFO", description="Minimum log level name")


class AppConfig(BaseSettings):
    """Complete dbdiff configuration"""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        case_sensitive=False,
        extra="ignore",
    )

    ConnectionStrings: ConnectionStringsSection = Field(default_factory=ConnectionStringsSection)
    Export: ExportSection = Field(default_factory=ExportSection)
    Logging: LoggingSection = Field(default_factory=LoggingSection)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # The JSON file arrives as init arguments; environment variables win over it
        return env_settings, init_settings


def get_default_config_path() -> Path:
    """Return the config file looked for when ``--config`` is not given."""
    return Path.cwd() / DEFAULT_CONFIG_FILE


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON config file into a dict.

    Args:
        path: Path that has already passed ``validate_config_path``

    Returns:
        Parsed JSON object

    Raises:
        InputValidationError: If the file is not a JSON object
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as e:
        raise InputValidationError(f"Invalid JSON in configuration file {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise InputValidationError(f"Configuration file {path.name} must contain a JSON object")
    return data


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from file and environment.

    Args:
        config_path: Validated config file to read. When None, ``appsettings.json``
            in the working directory is read if present.

    Returns:
        The merged configuration

    Raises:
        InputValidationError: If the file is not valid JSON or a value has the wrong type
    """
    if config_path is None:
        default_path = get_default_config_path()
        config_path = default_path if default_path.is_file() else None

    file_settings: dict[str, Any] = {}
    if config_path is not None:
        file_settings = read_config_file(config_path)
        logger.debug(f"Loaded configuration from {config_path}")

    try:
        return AppConfig(**file_settings)
    except (ValidationError, SettingsError) as e:
        raise InputValidationError(f"Invalid configuration: {e}") from e
