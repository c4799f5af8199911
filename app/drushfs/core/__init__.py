"""Core building blocks: paths, configuration, run context, and errors.

This module exports the pieces every other module builds on.
"""

from drushfs.core.context import RunContext
from drushfs.core.errors import ErrorKind, FsError

__all__ = ["ErrorKind", "FsError", "RunContext"]
