"""Tree copy, move and delete operator.

Wraps the recursive tree primitives with preflight checks, dry-run
support and structured error reporting. Every operation returns a
TreeActionResult; failures are also recorded in the run context.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from drushfs.core.context import RunContext
from drushfs.core.errors import ErrorKind, FsError
from drushfs.filesystem.tree import copy_tree, delete_tree, ensure_path

logger = logging.getLogger(__name__)


def _location(path: Path) -> Path:
    """Absolute location of path itself, resolving its parents but not a final symlink."""
    return path.parent.resolve() / path.name


class MoveStrategy(Enum):
    """How a move was carried out.

    Attributes:
        RENAME: A single rename call.
        COPY: Recursive copy followed by recursive delete of the source.
    """

    RENAME = "rename"
    COPY = "copy"


@dataclass(frozen=True, slots=True)
class TreeActionResult:
    """Result of a single tree operation.

    Attributes:
        path: Path that was created, deleted or written to.
        success: Whether the operation completed successfully.
        source: Source path for copy and move, None otherwise.
        error: Reported error if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (no filesystem changes).
        strategy: How a move was performed, None for other operations.
    """

    path: str
    success: bool
    source: str | None = None
    error: FsError | None = None
    dry_run: bool = False
    strategy: MoveStrategy | None = None


class TreeOperator:
    """Copies, moves, deletes and creates directory trees.

    Preflight checks run before anything on disk is changed, so a
    rejected copy or move leaves both paths as they were.

    Attributes:
        _context: Run context receiving reported errors.
        _dry_run: If True, simulate operations without modifying the filesystem.
    """

    def __init__(self, context: RunContext, *, dry_run: bool = False) -> None:
        """Initialize the TreeOperator.

        Args:
            context: Run context receiving reported errors.
            dry_run: If True, report what would be done without doing it.
        """
        self._context = context
        self._dry_run = dry_run

    def copy(
        self, src: Path | str, dest: Path | str, *, overwrite: bool = False
    ) -> TreeActionResult:
        """Recursively copy src to dest.

        Args:
            src: File or directory to copy.
            dest: Path to create. Its parent must exist and be writable.
            overwrite: If True, an existing dest is deleted first.

        Returns:
            TreeActionResult for dest.
        """
        source = Path(src)
        target = Path(dest)

        error = self._preflight(source, target, overwrite=overwrite)
        if error is not None:
            return self._failed(target, error, source=source)

        if self._dry_run:
            logger.info("Dry-run: would copy %s to %s", source, target)
            return TreeActionResult(
                path=str(target), success=True, source=str(source), dry_run=True
            )

        self._clear_destination(target)

        if not copy_tree(source, target):
            error = self._context.report_error(
                ErrorKind.COPY_FAILURE,
                f"Unable to copy {source} to {target}.",
            )
            return self._failed(target, error, source=source)

        logger.debug("Copied %s to %s", source, target)
        return TreeActionResult(path=str(target), success=True, source=str(source))

    def move(
        self, src: Path | str, dest: Path | str, *, overwrite: bool = False
    ) -> TreeActionResult:
        """Move src to dest, renaming when possible.

        A rename that fails (typically across filesystems) falls back to
        a recursive copy followed by deleting src. The fallback is not
        atomic: an interruption between the two steps leaves both trees.

        Args:
            src: File or directory to move.
            dest: New location. Its parent must exist and be writable.
            overwrite: If True, an existing dest is deleted first.

        Returns:
            TreeActionResult for dest, recording the strategy used.
        """
        source = Path(src)
        target = Path(dest)

        error = self._preflight(source, target, overwrite=overwrite)
        if error is not None:
            return self._failed(target, error, source=source)

        if self._dry_run:
            logger.info("Dry-run: would move %s to %s", source, target)
            return TreeActionResult(
                path=str(target), success=True, source=str(source), dry_run=True
            )

        self._clear_destination(target)

        try:
            os.rename(source, target)
        except OSError as e:
            logger.debug("Rename %s -> %s failed (%s), copying instead", source, target, e)
            self._remove_spurious_file(source, target)
        else:
            logger.debug("Renamed %s to %s", source, target)
            return TreeActionResult(
                path=str(target),
                success=True,
                source=str(source),
                strategy=MoveStrategy.RENAME,
            )

        if not copy_tree(source, target):
            error = self._context.report_error(
                ErrorKind.MOVE_FAILURE,
                f"Unable to move {source} to {target}.",
            )
            return self._failed(target, error, source=source, strategy=MoveStrategy.COPY)

        if not delete_tree(source):
            logger.warning("Moved %s to %s but could not remove the source", source, target)

        return TreeActionResult(
            path=str(target),
            success=True,
            source=str(source),
            strategy=MoveStrategy.COPY,
        )

    def delete(self, path: Path | str) -> TreeActionResult:
        """Recursively delete a path. A missing path is a success.

        Args:
            path: File or directory to delete.

        Returns:
            TreeActionResult for path.
        """
        target = Path(path)

        if self._dry_run:
            logger.info("Dry-run: would delete %s", target)
            return TreeActionResult(path=str(target), success=True, dry_run=True)

        if not delete_tree(target):
            error = self._context.report_error(
                ErrorKind.DELETE_FAILURE,
                f"Unable to delete {target}.",
            )
            return self._failed(target, error)

        return TreeActionResult(path=str(target), success=True)

    def mkdir(self, path: Path | str) -> TreeActionResult:
        """Create a directory and its missing ancestors.

        Args:
            path: Directory to create.

        Returns:
            TreeActionResult for path.
        """
        target = Path(path)

        if self._dry_run:
            logger.info("Dry-run: would create %s", target)
            return TreeActionResult(path=str(target), success=True, dry_run=True)

        if not ensure_path(target):
            error = self._context.report_error(
                ErrorKind.MKDIR_FAILURE,
                f"Unable to create directory {target}.",
            )
            return self._failed(target, error)

        return TreeActionResult(path=str(target), success=True)

    def _preflight(self, source: Path, target: Path, *, overwrite: bool) -> FsError | None:
        """Run the read-only checks shared by copy and move.

        Args:
            source: Source path.
            target: Destination path.
            overwrite: Whether an existing destination is acceptable.

        Returns:
            The reported FsError if a check failed, None if all passed.
        """
        if (target.exists() or target.is_symlink()) and not overwrite:
            return self._context.report_error(
                ErrorKind.DESTINATION_EXISTS,
                f"Destination {target} already exists (copying or moving {source}).",
            )

        if not source.exists() or not os.access(source, os.R_OK):
            return self._context.report_error(
                ErrorKind.SOURCE_NOT_FOUND,
                f"Source {source} is not readable or does not exist (target {target}).",
            )

        if _location(target).is_relative_to(_location(source)):
            return self._context.report_error(
                ErrorKind.DESTINATION_INSIDE_SOURCE,
                f"Destination {target} is {source} itself or lies inside it.",
            )

        if not os.access(target.parent, os.W_OK):
            return self._context.report_error(
                ErrorKind.DESTINATION_NOT_WRITABLE,
                f"Destination parent of {target} is not writable (source {source}).",
            )

        return None

    def _clear_destination(self, target: Path) -> None:
        """Delete an existing destination before an overwriting copy or move."""
        if target.exists() or target.is_symlink():
            logger.debug("Overwriting %s", target)
            if not delete_tree(target):
                logger.warning("Could not fully remove %s before overwriting", target)

    def _remove_spurious_file(self, source: Path, target: Path) -> None:
        """Delete an empty file some platforms leave behind after a failed rename."""
        if not source.exists():
            return
        if target.is_file() and not target.is_symlink() and target.stat().st_size == 0:
            logger.debug("Removing empty file %s left by failed rename", target)
            try:
                target.unlink()
            except OSError as e:
                logger.warning("Could not remove %s: %s", target, e)

    def _failed(
        self,
        target: Path,
        error: FsError,
        *,
        source: Path | None = None,
        strategy: MoveStrategy | None = None,
    ) -> TreeActionResult:
        """Build a failed result."""
        return TreeActionResult(
            path=str(target),
            success=False,
            source=str(source) if source is not None else None,
            error=error,
            strategy=strategy,
        )
