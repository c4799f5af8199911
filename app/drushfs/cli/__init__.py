"""CLI package for drushfs.

This package contains the Typer application and all subcommands.
"""

from drushfs.cli.main import app

__all__ = ["app"]
