# Directory-tree builder — walks the storage root into nested entries.
# Created: 2026-10-19
#
# The filesystem is the store: nothing here is cached, every listing is a
# fresh walk. Unreadable children are skipped with a warning so one bad
# entry never fails the whole listing; only an unreadable root is an error.

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Union

from filedrop.storage.errors import StorageIOError
from filedrop.storage.paths import TEMP_PREFIX, is_safe_path, to_relative

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileEntry:
    """A regular file under the storage root."""

    name: str
    relative_path: str
    size: int
    created_at: datetime
    modified_at: datetime
    kind: EntryKind = field(default=EntryKind.FILE, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.kind.value,
            "relativePath": self.relative_path,
            "size": self.size,
            "createdAt": self.created_at.isoformat(),
            "modifiedAt": self.modified_at.isoformat(),
        }


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory under the storage root, with its children already walked."""

    name: str
    relative_path: str
    children: tuple[Entry, ...] = ()
    kind: EntryKind = field(default=EntryKind.DIRECTORY, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.kind.value,
            "relativePath": self.relative_path,
            "children": [child.to_dict() for child in self.children],
        }


Entry = Union[FileEntry, DirectoryEntry]


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


def _created(st: os.stat_result) -> datetime:
    # st_birthtime exists on macOS/BSD and recent Windows; Linux falls back to ctime
    return _timestamp(getattr(st, "st_birthtime", st.st_ctime))


def _sort_key(entry: Entry) -> tuple[bool, str]:
    return (entry.kind is not EntryKind.DIRECTORY, entry.name.lower())


def _walk(directory: Path, root: Path) -> list[Entry]:
    entries: list[Entry] = []
    with os.scandir(directory) as it:
        for item in it:
            if item.name.startswith(TEMP_PREFIX):
                continue
            path = Path(item.path)
            try:
                if item.is_symlink() and not is_safe_path(path, root):
                    logger.warning("Skipping symlink pointing outside storage: %s", path)
                    continue
                st = item.stat()
                if stat.S_ISDIR(st.st_mode) and item.is_symlink():
                    logger.debug("Not following symlinked directory: %s", path)
                    continue
                if stat.S_ISDIR(st.st_mode):
                    children = _walk(path, root)
                    entries.append(
                        DirectoryEntry(
                            name=item.name,
                            relative_path=to_relative(path, root),
                            children=tuple(children),
                        )
                    )
                elif stat.S_ISREG(st.st_mode):
                    entries.append(
                        FileEntry(
                            name=item.name,
                            relative_path=to_relative(path, root),
                            size=st.st_size,
                            created_at=_created(st),
                            modified_at=_timestamp(st.st_mtime),
                        )
                    )
            except OSError as e:
                logger.warning("Skipping unreadable entry %s: %s", path, e)
    entries.sort(key=_sort_key)
    return entries


def build_tree(root: Path) -> list[Entry]:
    """Walk *root* recursively and return its top-level entries.

    Directories come before files; each group is sorted by name,
    case-insensitively.

    Raises:
        StorageIOError: if the root itself cannot be read.
    """
    root = root.resolve()
    try:
        return _walk(root, root)
    except OSError as e:
        logger.error("Cannot read storage directory %s: %s", root, e)
        raise StorageIOError(f"Cannot read storage directory: {e.strerror or e}") from e
