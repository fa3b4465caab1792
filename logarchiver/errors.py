class ArchiverError(Exception):
    """Base error for the project."""

class PathNotFoundError(ArchiverError, FileNotFoundError):
    pass

class MissingArgumentError(ArchiverError, ValueError):
    pass

class InvalidTimestampError(ArchiverError):
    pass

class FileLockedError(ArchiverError):
    """Raised when a file is held open by another process."""

class ArchiveIncompleteError(ArchiverError):
    """The archive for a month-group did not verify; originals must stay."""

class RelocationFailedError(ArchiverError):
    pass

class LockCheckFailedError(ArchiverError):
    """The lock probe hit an I/O error that is not a lock."""
