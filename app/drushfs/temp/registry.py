"""Registry of temporary paths deleted when the process exits.

Every temporary file or directory handed out during a run is registered
here. The first registration arms an exit hook; at exit the registry is
drained once, deleting whatever is still on disk in registration order.

Lifecycle:
    EMPTY -> ARMED (first register) -> DRAINING -> DRAINED

Registering after DRAINED is not supported and not checked.
"""

from __future__ import annotations

import atexit
import logging
import threading
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from drushfs.filesystem.tree import delete_tree

logger = logging.getLogger(__name__)

ExitHookInstaller = Callable[[Callable[[], None]], Any]


class RegistryState(Enum):
    """Lifecycle state of a TempRegistry."""

    EMPTY = "empty"
    ARMED = "armed"
    DRAINING = "draining"
    DRAINED = "drained"


class TempRegistry:
    """Ordered list of paths to delete at shutdown.

    Paths are never taken off the list before the drain. Releasing a
    temporary resource early simply deletes it; the drain then finds it
    gone and moves on.

    Attributes:
        _paths: Registered paths, in registration order, duplicates kept.
        _state: Current lifecycle state.
        _install_hook: Installs the drain as an exit callback (atexit.register).
    """

    def __init__(self, *, install_hook: ExitHookInstaller = atexit.register) -> None:
        """Initialize an empty registry.

        Args:
            install_hook: Called once with the drain callback on the first
                registration. Defaults to atexit.register.
        """
        self._paths: list[Path] = []
        self._state = RegistryState.EMPTY
        self._install_hook = install_hook
        self._lock = threading.Lock()

    @property
    def state(self) -> RegistryState:
        """Current lifecycle state."""
        return self._state

    @property
    def paths(self) -> list[Path]:
        """Copy of the registered paths, oldest first."""
        with self._lock:
            return list(self._paths)

    def register(self, path: Path | str) -> list[Path]:
        """Mark a path for deletion at shutdown.

        The first call arms the exit hook.

        Args:
            path: File or directory to delete at shutdown.

        Returns:
            Copy of all registered paths, including this one.
        """
        with self._lock:
            if self._state is RegistryState.EMPTY:
                self._install_hook(self.drain)
                self._state = RegistryState.ARMED
                logger.debug("Temp registry armed")
            self._paths.append(Path(path))
            return list(self._paths)

    def drain(self) -> None:
        """Delete every registered path that still exists.

        Runs at most once; later calls return immediately. Never raises:
        failures are logged at debug level and skipped.
        """
        with self._lock:
            if self._state in (RegistryState.DRAINING, RegistryState.DRAINED):
                return
            self._state = RegistryState.DRAINING
            paths = list(self._paths)

        for path in paths:
            try:
                _delete_registered(path)
            except Exception as e:
                logger.debug("Could not clean up %s: %s", path, e)

        with self._lock:
            self._state = RegistryState.DRAINED


def _delete_registered(path: Path) -> None:
    """Delete one registered path, resolving its kind now."""
    if not path.exists() and not path.is_symlink():
        return
    if path.is_dir() and not path.is_symlink():
        if not delete_tree(path):
            logger.debug("Partial cleanup of %s", path)
    else:
        path.unlink()


_default_registry: TempRegistry | None = None
_default_lock = threading.Lock()


def get_registry() -> TempRegistry:
    """Get the process-wide registry, creating it on first use.

    Returns:
        The shared TempRegistry instance.
    """
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = TempRegistry()
        return _default_registry
