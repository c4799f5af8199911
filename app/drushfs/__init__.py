"""drushfs - filesystem utilities for command-line site tooling.

Recursive copy, move and delete, mkdir -p, temporary files and
directories that clean up after themselves, and backup directory
planning.
"""

__version__ = "0.1.0"
