"""Storage layer: everything that touches the storage root on disk."""

from filedrop.storage.errors import (
    FileTooLargeError,
    ForbiddenPathError,
    NotFoundError,
    StorageError,
    StorageIOError,
    ValidationError,
)
from filedrop.storage.store import FileStore
from filedrop.storage.tree import DirectoryEntry, Entry, EntryKind, FileEntry
from filedrop.storage.uploads import IncomingFile, UploadResult

__all__ = [
    "DirectoryEntry",
    "Entry",
    "EntryKind",
    "FileEntry",
    "FileStore",
    "FileTooLargeError",
    "ForbiddenPathError",
    "IncomingFile",
    "NotFoundError",
    "StorageError",
    "StorageIOError",
    "UploadResult",
    "ValidationError",
]
