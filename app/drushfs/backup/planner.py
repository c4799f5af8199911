"""Backup directory planning.

Derives where a backup should go and prepares that directory on disk.
Backups are laid out as:

    <backup-dir>/<subdir>/<YYYYmmddHHMMSS>/

where backup-dir defaults to ~/drush-backups and subdir defaults to the
configured database name. The planned path is computed once per run, so
every backup taken during a run lands in the same directory.
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from drushfs.core.context import RunContext
from drushfs.core.errors import ErrorKind
from drushfs.core.paths import get_default_backup_base
from drushfs.filesystem.tree import ensure_path

logger = logging.getLogger(__name__)

# Context key under which the planned backup directory is cached
BACKUP_DIR_CONTEXT_KEY = "backup_dir"

UNKNOWN_SUBDIR = "unknown"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def _is_nested(path: Path, root: Path) -> bool:
    """Check if path is root itself or lies somewhere below it."""
    return path.resolve().is_relative_to(root.resolve())


class BackupPlanner:
    """Plans and prepares the backup directory for a run.

    Options read from the run context:
        backup-location: Exact backup directory, used verbatim.
        backup-dir: Base directory for timestamped backups.
        database: Default subdirectory name.
        root: Protected root that must not contain the backup.

    Attributes:
        _context: Run context for options, caching and errors.
    """

    def __init__(self, context: RunContext) -> None:
        """Initialize the BackupPlanner.

        Args:
            context: Run context for options, caching and error reporting.
        """
        self._context = context

    def plan_backup_dir(self, subdir: str | None = None) -> Path:
        """Compute the backup directory for this run.

        Only the first call computes anything; later calls return the same
        path regardless of subdir.

        Args:
            subdir: Subdirectory under the backup base. Defaults to the
                configured database name, or "unknown".

        Returns:
            The planned backup directory. Nothing is created on disk.
        """
        cached: Path | None = self._context.get_context(BACKUP_DIR_CONTEXT_KEY)
        if cached is not None:
            return cached

        location = self._context.get_option("backup-location")
        if location:
            backup_dir = Path(location)
        else:
            base = Path(self._context.get_option("backup-dir") or get_default_backup_base())
            name = subdir or self._context.get_option("database") or UNKNOWN_SUBDIR
            timestamp = datetime.now(UTC).strftime(TIMESTAMP_FORMAT)
            backup_dir = base / name / timestamp

        self._context.set_context(BACKUP_DIR_CONTEXT_KEY, backup_dir)
        logger.debug("Planned backup directory %s", backup_dir)
        return backup_dir

    def prepare_backup_dir(self, subdir: str | None = None) -> Path | None:
        """Create the backup directory for this run.

        Refuses, without touching the filesystem, when the backup's parent
        is the protected root or lies inside it.

        Args:
            subdir: Passed to plan_backup_dir().

        Returns:
            The created backup directory, or None on failure (an error is
            reported).
        """
        backup_dir = self.plan_backup_dir(subdir)
        parent = backup_dir.parent

        root = self._context.get_option("root")
        if root and _is_nested(parent, Path(root)):
            self._context.report_error(
                ErrorKind.BACKUP_INSIDE_PROTECTED_ROOT,
                f"Backup directory {backup_dir} may not be placed inside "
                f"the protected root {root}.",
            )
            return None

        if parent.is_dir():
            if not os.access(parent, os.W_OK):
                self._context.report_error(
                    ErrorKind.BACKUP_PREP_FAILURE,
                    f"Backup directory {parent} is not writable.",
                )
                return None
        elif not ensure_path(parent):
            self._context.report_error(
                ErrorKind.BACKUP_PREP_FAILURE,
                f"Unable to create backup directory {parent}.",
            )
            return None

        if not ensure_path(backup_dir):
            self._context.report_error(
                ErrorKind.BACKUP_PREP_FAILURE,
                f"Unable to create backup directory {backup_dir}.",
            )
            return None

        logger.info("Prepared backup directory %s", backup_dir)
        return backup_dir
