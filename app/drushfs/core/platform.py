"""Platform detection helpers."""

import os
import sys


def is_windows_family() -> bool:
    """Check if the current platform belongs to the Windows family.

    Cygwin and MSYS builds report a POSIX os.name but still run on
    Windows filesystems, so sys.platform is consulted too.

    Returns:
        True on Windows, Cygwin and MSYS; False otherwise.
    """
    if os.name == "nt":
        return True
    return sys.platform.startswith(("win", "cygwin", "msys"))
