# Download and delete — single-path operations on the storage root.
# Created: 2026-10-19
#
# Downloads follow symlinks that stay inside the root. Deletes never do:
# removing a link removes the link, not what it points to.

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from filedrop.storage.errors import ForbiddenPathError, NotFoundError, StorageIOError
from filedrop.storage.paths import normalize_relative, resolve_within_root
from filedrop.storage.tree import EntryKind

logger = logging.getLogger(__name__)


def _resolve_existing(root: Path, relative_path: str) -> Path:
    target = resolve_within_root(root, relative_path)
    if target == root.resolve():
        raise ForbiddenPathError("The storage directory itself cannot be addressed")
    if not target.exists():
        raise NotFoundError("File not found", path=relative_path)
    return target


def _entry_path(root: Path, relative_path: str) -> Path:
    """The entry *relative_path* names, with its last component unresolved.

    Parent folders are resolved (and contained) as usual, so a symlink at
    the end of the path is returned as the link itself.
    """
    target = resolve_within_root(root, relative_path)
    if target == root.resolve():
        raise ForbiddenPathError("The storage directory itself cannot be addressed")
    parent, _, name = normalize_relative(relative_path).rpartition("/")
    if name == "..":
        return target
    return resolve_within_root(root, parent) / name


def resolve_download(root: Path, relative_path: str) -> Path:
    """Return the absolute path of the file to serve for *relative_path*."""
    target = _resolve_existing(root, relative_path)
    if not target.is_file():
        raise NotFoundError("File not found", path=relative_path)
    return target


def delete_entry(root: Path, relative_path: str) -> EntryKind:
    """Delete a file, or a directory and everything under it.

    A symlink is unlinked and its target left alone. Returns the kind of
    entry that was removed.
    """
    entry = _entry_path(root, relative_path)
    if not entry.is_symlink() and not entry.exists():
        raise NotFoundError("File not found", path=relative_path)
    try:
        if entry.is_symlink():
            entry.unlink()
            kind = EntryKind.FILE
        elif entry.is_dir():
            shutil.rmtree(entry)
            kind = EntryKind.DIRECTORY
        else:
            entry.unlink()
            kind = EntryKind.FILE
    except FileNotFoundError as e:
        raise NotFoundError("File not found", path=relative_path) from e
    except OSError as e:
        raise StorageIOError(f"Failed to delete: {e.strerror or e}", path=relative_path) from e

    logger.info("Deleted %s: %s", kind.value, relative_path)
    return kind
