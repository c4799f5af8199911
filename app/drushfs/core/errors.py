"""Error kinds and structured error records.

Filesystem operations never raise for ordinary failures. They report an
FsError to the run context and hand back a failed result instead.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Stable identifiers for reported filesystem errors.

    Attributes:
        DESTINATION_EXISTS: Copy/move target exists and overwrite is off.
        SOURCE_NOT_FOUND: Copy/move source is missing or unreadable.
        DESTINATION_NOT_WRITABLE: Parent of the copy/move target is not writable.
        DESTINATION_INSIDE_SOURCE: Copy/move target is the source or lies inside it.
        COPY_FAILURE: The recursive copy failed partway.
        MOVE_FAILURE: Both rename and the copy fallback failed.
        DELETE_FAILURE: A recursive delete failed partway.
        MKDIR_FAILURE: A directory path could not be created.
        TEMP_DIR_UNAVAILABLE: No usable temporary directory could be found.
        BACKUP_INSIDE_PROTECTED_ROOT: Backup would be nested in the protected root.
        BACKUP_PREP_FAILURE: Backup directory could not be created.
    """

    DESTINATION_EXISTS = "DestinationExists"
    SOURCE_NOT_FOUND = "SourceNotFound"
    DESTINATION_NOT_WRITABLE = "DestinationNotWritable"
    DESTINATION_INSIDE_SOURCE = "DestinationInsideSource"
    COPY_FAILURE = "CopyFailure"
    MOVE_FAILURE = "MoveFailure"
    DELETE_FAILURE = "DeleteFailure"
    MKDIR_FAILURE = "MkdirFailure"
    TEMP_DIR_UNAVAILABLE = "TempDirUnavailable"
    BACKUP_INSIDE_PROTECTED_ROOT = "BackupInsideProtectedRoot"
    BACKUP_PREP_FAILURE = "BackupPrepFailure"


@dataclass(frozen=True, slots=True)
class FsError:
    """A reported error.

    Attributes:
        kind: Stable error identifier.
        message: Human-readable description naming the paths involved.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
