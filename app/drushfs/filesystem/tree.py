"""Recursive tree primitives.

Plain functions that walk a directory tree and report success as a
boolean. They never follow symlinks: a link is deleted or copied as a
link, and the tree it points to is left alone.
"""

import logging
import os
import shutil
from pathlib import Path

from drushfs.core.platform import is_windows_family

logger = logging.getLogger(__name__)


def _lexists(path: Path) -> bool:
    """Check existence without following a final symlink."""
    return path.exists() or path.is_symlink()


def delete_tree(path: Path | str) -> bool:
    """Recursively delete a file or directory tree.

    A missing path counts as deleted. Deletion stops at the first entry
    that cannot be removed; whatever was removed before that stays removed.

    Args:
        path: File, symlink or directory to delete.

    Returns:
        True if the path no longer exists, False on the first failure.
    """
    target = Path(path)

    if not _lexists(target):
        return True

    if target.is_symlink() or not target.is_dir():
        try:
            target.unlink()
        except OSError as e:
            logger.warning("Could not delete %s: %s", target, e)
            return False
        return True

    if not delete_tree_contents(target):
        return False

    try:
        target.rmdir()
    except OSError as e:
        logger.warning("Could not remove directory %s: %s", target, e)
        return False
    return True


def delete_tree_contents(path: Path | str) -> bool:
    """Delete everything inside a directory, keeping the directory itself.

    Args:
        path: Directory to empty.

    Returns:
        True if the directory is now empty, False on the first failure.
    """
    target = Path(path)
    try:
        children = list(target.iterdir())
    except OSError as e:
        logger.warning("Could not list %s: %s", target, e)
        return False

    for child in children:
        if not delete_tree(child):
            return False
    return True


def copy_tree(src: Path | str, dest: Path | str) -> bool:
    """Recursively copy src to dest, preserving permission bits.

    The parent of dest must already exist. Directories are created one
    level at a time as the walk descends. Permission bits are copied
    after each node is complete, except on Windows.

    Args:
        src: File, symlink or directory to copy.
        dest: Path to create.

    Returns:
        True if the whole tree was copied, False on the first failure.
    """
    source = Path(src)
    target = Path(dest)

    try:
        if source.is_symlink():
            os.symlink(os.readlink(source), target)
            return True

        if source.is_dir():
            children = list(source.iterdir())
            target.mkdir(exist_ok=True)
            for child in children:
                if not copy_tree(child, target / child.name):
                    return False
        else:
            shutil.copyfile(source, target)

        if not is_windows_family():
            shutil.copymode(source, target)
    except OSError as e:
        logger.warning("Could not copy %s to %s: %s", source, target, e)
        return False

    return True


def ensure_path(path: Path | str) -> bool:
    """Create a directory and any missing ancestors (mkdir -p).

    Idempotent: an existing directory is success.

    Args:
        path: Directory to create.

    Returns:
        True if path is a directory afterwards.
    """
    target = Path(path)

    if target.is_dir():
        return True

    parent = target.parent
    if parent != target and not ensure_path(parent):
        return False

    try:
        target.mkdir()
    except FileExistsError:
        # Someone else created it, or a non-directory is in the way
        return target.is_dir()
    except OSError as e:
        logger.warning("Could not create directory %s: %s", target, e)
        return False
    return True


def file_nonempty(path: Path | str) -> bool:
    """Check if a path exists and has a size greater than zero."""
    try:
        return Path(path).stat().st_size > 0
    except OSError:
        return False
