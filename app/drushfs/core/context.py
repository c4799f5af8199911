"""Run-scoped option and context store.

A RunContext lives for one command run. It holds the effective options
(config file values overlaid with command-line flags), a scratch area
for values computed once per run, and the log of reported errors.
"""

import logging
from collections.abc import Mapping
from typing import Any

from drushfs.core.config import FsConfig
from drushfs.core.errors import ErrorKind, FsError

logger = logging.getLogger(__name__)


class RunContext:
    """Options, memoized values and reported errors for one run.

    Attributes:
        _options: Effective option values keyed by dashed option name.
        _context: Values computed during the run (temp root, backup dir).
        _errors: Errors reported so far, in order.
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        """Initialize the RunContext.

        Args:
            options: Initial option values. None values are dropped.
        """
        self._options: dict[str, Any] = {
            name: value for name, value in (options or {}).items() if value is not None
        }
        self._context: dict[str, Any] = {}
        self._errors: list[FsError] = []

    @classmethod
    def from_config(
        cls,
        config: FsConfig,
        overrides: Mapping[str, Any] | None = None,
    ) -> "RunContext":
        """Build a context from a config file, with command-line overrides.

        Args:
            config: Loaded configuration.
            overrides: Option values that win over the config file.
                None values leave the config value in place.

        Returns:
            A new RunContext.
        """
        options: dict[str, Any] = dict(config.to_options())
        for name, value in (overrides or {}).items():
            if value is not None:
                options[name] = value
        return cls(options)

    def get_option(self, name: str, default: Any = None) -> Any:
        """Get an option value, or default if unset."""
        return self._options.get(name, default)

    def set_option(self, name: str, value: Any) -> None:
        """Set an option value for the rest of the run."""
        self._options[name] = value

    @property
    def options(self) -> dict[str, Any]:
        """Copy of the effective options."""
        return dict(self._options)

    def get_context(self, key: str, default: Any = None) -> Any:
        """Get a value computed earlier in the run, or default."""
        return self._context.get(key, default)

    def set_context(self, key: str, value: Any) -> None:
        """Store a value for the rest of the run."""
        self._context[key] = value

    def report_error(self, kind: ErrorKind, message: str) -> FsError:
        """Record an error.

        Args:
            kind: Stable error identifier.
            message: Human-readable description.

        Returns:
            The recorded FsError, for embedding in a result.
        """
        error = FsError(kind=kind, message=message)
        self._errors.append(error)
        logger.debug("Reported %s: %s", kind.value, message)
        return error

    @property
    def errors(self) -> list[FsError]:
        """Errors reported so far, oldest first."""
        return list(self._errors)

    @property
    def has_errors(self) -> bool:
        """Check if any error has been reported."""
        return bool(self._errors)
