"""Temporary file and directory allocation.

Temporary resources are created under a temp root discovered once per
run, and registered with a TempRegistry so they disappear at exit even
if nobody releases them. Callers that know when they are done can
release a handle early, or use it as a context manager.
"""

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import TracebackType

from drushfs.core.context import RunContext
from drushfs.core.errors import ErrorKind
from drushfs.core.paths import get_fallback_temp_dir
from drushfs.core.platform import is_windows_family
from drushfs.filesystem.tree import delete_tree, ensure_path
from drushfs.temp.registry import TempRegistry, get_registry

logger = logging.getLogger(__name__)

# Context key under which the resolved temp root is cached
TEMP_ROOT_CONTEXT_KEY = "temp_root"

TEMP_FILE_PREFIX = "drush_"
TEMP_DIR_PREFIX = "drush_tmp_"

POSIX_TEMP_DIRS = ("/tmp",)
WINDOWS_TEMP_DIRS = ("c:\\windows\\temp", "c:\\winnt\\temp")


class TempKind(Enum):
    """Kind of temporary resource."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(slots=True)
class TempHandle:
    """A temporary file or directory owned by the current run.

    Attributes:
        path: Location of the resource.
        kind: Whether it is a file or a directory.
        released: True once release() has deleted it.
    """

    path: Path
    kind: TempKind
    released: bool = False

    def release(self) -> bool:
        """Delete the resource now. Safe to call more than once.

        Returns:
            True if the resource is gone.
        """
        if self.released:
            return True
        if self.kind is TempKind.DIRECTORY:
            ok = delete_tree(self.path)
        else:
            try:
                self.path.unlink(missing_ok=True)
                ok = True
            except OSError as e:
                logger.warning("Could not delete %s: %s", self.path, e)
                ok = False
        self.released = ok
        return ok

    def __fspath__(self) -> str:
        return str(self.path)

    def __enter__(self) -> "TempHandle":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def _is_usable_dir(path: Path) -> bool:
    """Check that a path is an existing, writable directory."""
    return path.is_dir() and os.access(path, os.W_OK)


class TempAllocator:
    """Creates uniquely named temporary files and directories.

    Attributes:
        _context: Run context for options, temp root caching and errors.
        _registry: Registry that deletes unreleased resources at exit.
    """

    def __init__(self, context: RunContext, registry: TempRegistry | None = None) -> None:
        """Initialize the TempAllocator.

        Args:
            context: Run context for options, caching and error reporting.
            registry: Registry to record resources in. Defaults to the
                process-wide registry.
        """
        self._context = context
        self._registry = registry if registry is not None else get_registry()

    def candidate_dirs(self) -> list[Path]:
        """List temp root candidates in priority order.

        Order: the configured temp-dir option, the platform's system temp
        directories, then the directory Python's tempfile module picks.

        Returns:
            Candidate directories, not yet checked for usability.
        """
        candidates: list[Path] = []

        configured = self._context.get_option("temp-dir")
        if configured:
            candidates.append(Path(configured))

        system_dirs = WINDOWS_TEMP_DIRS if is_windows_family() else POSIX_TEMP_DIRS
        candidates.extend(Path(d) for d in system_dirs)
        candidates.append(Path(tempfile.gettempdir()))
        return candidates

    def temp_root(self) -> Path | None:
        """Resolve the directory that holds this run's temporary resources.

        The first usable candidate wins. If none is usable, ./tmp under the
        current working directory is created and registered for deletion.
        The result is cached in the run context.

        Returns:
            The temp root, or None if no temp directory could be found
            (a TempDirUnavailable error is reported).
        """
        cached: Path | None = self._context.get_context(TEMP_ROOT_CONTEXT_KEY)
        if cached is not None:
            return cached

        for candidate in self.candidate_dirs():
            if _is_usable_dir(candidate):
                root = candidate
                break
        else:
            fallback = self._fallback_root()
            if fallback is None:
                return None
            root = fallback

        logger.debug("Using temp root %s", root)
        self._context.set_context(TEMP_ROOT_CONTEXT_KEY, root)
        return root

    def allocate_file(
        self,
        prefix: str = TEMP_FILE_PREFIX,
        data: str | bytes | None = None,
        *,
        suffix: str = "",
    ) -> TempHandle | None:
        """Create a uniquely named temporary file.

        The name is chosen and the file created in one atomic step, so two
        callers can never be handed the same file.

        Args:
            prefix: File name prefix.
            data: Content to write. Strings are written as UTF-8.
            suffix: File name suffix, e.g. ".sql".

        Returns:
            Handle to the file, or None on failure (an error is reported).
        """
        root = self.temp_root()
        if root is None:
            return None

        try:
            fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=root)
        except OSError as e:
            self._context.report_error(
                ErrorKind.TEMP_DIR_UNAVAILABLE,
                f"Could not create a temporary file in {root}: {e}",
            )
            return None

        path = Path(name)
        self._registry.register(path)

        payload = data.encode("utf-8") if isinstance(data, str) else data
        try:
            stream = os.fdopen(fd, "wb")
        except OSError as e:
            os.close(fd)
            self._context.report_error(
                ErrorKind.TEMP_DIR_UNAVAILABLE,
                f"Could not open temporary file {path}: {e}",
            )
            return None

        try:
            with stream:
                if payload:
                    stream.write(payload)
        except OSError as e:
            self._context.report_error(
                ErrorKind.TEMP_DIR_UNAVAILABLE,
                f"Could not write temporary file {path}: {e}",
            )
            return None

        return TempHandle(path=path, kind=TempKind.FILE)

    def allocate_dir(self) -> TempHandle | None:
        """Create a fresh, empty temporary directory.

        Names look like drush_tmp_<unix seconds>_<random>. The random part
        keeps two directories made within the same second apart.

        Returns:
            Handle to the directory, or None on failure (an error is reported).
        """
        root = self.temp_root()
        if root is None:
            return None

        prefix = f"{TEMP_DIR_PREFIX}{int(time.time())}_"
        try:
            name = tempfile.mkdtemp(prefix=prefix, dir=root)
        except OSError as e:
            self._context.report_error(
                ErrorKind.TEMP_DIR_UNAVAILABLE,
                f"Could not create a temporary directory in {root}: {e}",
            )
            return None

        path = Path(name)
        self._registry.register(path)
        return TempHandle(path=path, kind=TempKind.DIRECTORY)

    def _fallback_root(self) -> Path | None:
        """Create ./tmp as a last-resort temp root.

        Only a directory created here is registered for deletion; a
        pre-existing ./tmp is used but left in place at exit.

        Returns:
            The fallback directory, or None if it could not be created.
        """
        fallback = get_fallback_temp_dir()
        existed = fallback.is_dir()

        if not ensure_path(fallback) or not fallback.is_dir():
            self._context.report_error(
                ErrorKind.TEMP_DIR_UNAVAILABLE,
                f"Could not find or create a temporary directory (tried {fallback}).",
            )
            return None

        if not existed:
            self._registry.register(fallback)
        logger.info("No system temp directory usable, falling back to %s", fallback)
        return fallback
