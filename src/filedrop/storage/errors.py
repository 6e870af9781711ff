"""Storage error taxonomy.

These keep the storage layer HTTP-agnostic while still carrying enough
information (``status_code``, ``kind``) for the API layer's exception
handlers to map them to a JSON response.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base class for errors raised by storage operations."""

    status_code: int = 500
    kind: str = "StorageError"

    def __init__(self, message: str, **details: object):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(StorageError):
    """Required input is missing or malformed."""

    status_code = 400
    kind = "ValidationError"


class NotFoundError(StorageError):
    """The relative path does not exist under the storage root."""

    status_code = 404
    kind = "NotFound"


class ForbiddenPathError(StorageError):
    """The relative path resolves outside the storage root."""

    status_code = 403
    kind = "Forbidden"


class FileTooLargeError(StorageError):
    """An uploaded part exceeds the configured size limit."""

    status_code = 400
    kind = "FileTooLarge"

    def __init__(self, filename: str, limit_mb: int):
        super().__init__(f"File size exceeds limit ({limit_mb}MB)", file=filename)
        self.filename = filename
        self.limit_mb = limit_mb


class StorageIOError(StorageError):
    """The filesystem refused an operation (permissions, disk full, ...)."""

    status_code = 500
    kind = "IOError"
