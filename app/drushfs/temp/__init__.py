"""Temporary resource lifecycle.

This module provides the exit-time cleanup registry and the allocator
that hands out registered temporary files and directories.
"""

from drushfs.temp.allocator import TempAllocator, TempHandle, TempKind
from drushfs.temp.registry import RegistryState, TempRegistry, get_registry

__all__ = [
    "RegistryState",
    "TempAllocator",
    "TempHandle",
    "TempKind",
    "TempRegistry",
    "get_registry",
]
