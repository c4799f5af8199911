"""XDG-compliant path management for drushfs.

This module provides the standard locations drushfs reads from and
writes to when nothing else is configured.

Defaults:
- Config: ~/.config/drushfs/config.toml
- Backups: ~/drush-backups/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "drushfs"

# Directory under the user's home that collects backups by default
BACKUP_DIR_NAME = "drush-backups"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/drushfs/ (or XDG_CONFIG_HOME/drushfs/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/drushfs/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_backup_base() -> Path:
    """Get the default base directory for backups.

    Each backup lands in a per-database, timestamped subdirectory
    of this base.

    Returns:
        Path to ~/drush-backups/.
    """
    return Path.home() / BACKUP_DIR_NAME


def get_fallback_temp_dir() -> Path:
    """Get the last-resort temporary directory.

    Used only when no system temp directory is usable.

    Returns:
        Path to ./tmp under the current working directory.
    """
    return Path.cwd() / "tmp"
