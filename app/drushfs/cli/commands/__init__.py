"""CLI commands for drushfs.

This package contains all subcommand implementations.
"""

from drushfs.cli.commands import backup, config, fs, tmp

__all__ = ["backup", "config", "fs", "tmp"]
