"""Filesystem tree operations.

This module provides recursive delete, copy, move and mkdir -p,
both as plain boolean primitives and through the reporting
TreeOperator.
"""

from drushfs.filesystem.operator import MoveStrategy, TreeActionResult, TreeOperator
from drushfs.filesystem.tree import (
    copy_tree,
    delete_tree,
    delete_tree_contents,
    ensure_path,
    file_nonempty,
)

__all__ = [
    "MoveStrategy",
    "TreeActionResult",
    "TreeOperator",
    "copy_tree",
    "delete_tree",
    "delete_tree_contents",
    "ensure_path",
    "file_nonempty",
]
