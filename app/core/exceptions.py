"""
app/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers catch specific
cases and return the correct HTTP status code without leaking internals.

A file that fails category validation is NOT an exception inside the
validator; it is a normal ValidationOutcome. FileRejectedError only exists
so the upload service can stop the store step and hand the message back.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""


# ── Upload exceptions ──────────────────────────────────────────────────────────

class UploadReadError(AppBaseException):
    """Raised when an uploaded file's content cannot be opened or read."""


class FileRejectedError(AppBaseException):
    """Raised when an upload fails category validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidEntityTypeError(AppBaseException):
    """Raised when a file is attached to an unknown kind of record."""


# ── Stored file exceptions ─────────────────────────────────────────────────────

class StoredFileNotFoundError(AppBaseException):
    """Raised when a file id is not present in the registry."""


class FileAccessDeniedError(AppBaseException):
    """Raised when a tenant asks for a file owned by another tenant."""


class StorageError(AppBaseException):
    """Raised when the storage backend cannot write, read or delete a file."""
