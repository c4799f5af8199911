"""drushfs configuration file.

This module provides the configuration model and I/O functions for the
settings that drive backup planning and temp directory discovery.

Configuration is stored in ~/.config/drushfs/config.toml, for example:

    backup_dir = "/srv/backups"
    root = "/var/www/site"
    database = "site_db"
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from drushfs.core.paths import get_config_path


class FsConfig(BaseModel):
    """Persistent settings for drushfs.

    Every field is optional; unset fields fall back to the built-in
    defaults at the point of use.

    Attributes:
        backup_location: Exact backup directory, used verbatim when set.
        backup_dir: Base directory for timestamped backups.
        root: Protected root that backups may never be nested inside.
        database: Database name used as the default backup subdirectory.
        temp_dir: Preferred temporary directory, tried before system ones.
    """

    model_config = ConfigDict(extra="forbid")

    backup_location: Annotated[
        str | None,
        Field(description="Exact backup directory (overrides backup_dir)"),
    ] = None
    backup_dir: Annotated[
        str | None,
        Field(description="Base directory for timestamped backups"),
    ] = None
    root: Annotated[
        str | None,
        Field(description="Protected root directory"),
    ] = None
    database: Annotated[
        str | None,
        Field(min_length=1, description="Database name for backup subdirectories"),
    ] = None
    temp_dir: Annotated[
        str | None,
        Field(description="Preferred temporary directory"),
    ] = None

    def to_options(self) -> dict[str, str]:
        """Convert set fields to context option names.

        Option names use dashes, matching the CLI flags.

        Returns:
            Mapping of option name to value for every field that is set.
        """
        return {
            name.replace("_", "-"): value
            for name, value in self.model_dump(exclude_none=True).items()
        }


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> FsConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated FsConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return FsConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> FsConfig:
    """Load configuration, treating a missing file as an empty config.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        The loaded FsConfig, or a default FsConfig if no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return FsConfig()


def save_config(config: FsConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The FsConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(exclude_none=True), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
