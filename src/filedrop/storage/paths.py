# Path containment — every relative path is resolved against the storage root.
# Created: 2026-10-19

from __future__ import annotations

from pathlib import Path, PurePosixPath

from filedrop.storage.errors import ForbiddenPathError

# Prefix for in-flight upload files; hidden from listings.
TEMP_PREFIX = ".filedrop-"


def is_safe_path(path: Path, root: Path) -> bool:
    """Return True if *path* (resolved) is *root* or lives beneath it."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def normalize_relative(relative_path: str) -> str:
    """Normalize a client-supplied relative path to ``a/b/c`` form.

    Backslashes are treated as separators and empty or ``.`` segments are
    dropped. ``..`` segments are kept so containment is decided by resolving
    against the real root, not by string inspection.
    """
    parts = [p for p in relative_path.replace("\\", "/").split("/") if p not in ("", ".")]
    return "/".join(parts)


def resolve_within_root(root: Path, relative_path: str) -> Path:
    """Resolve *relative_path* under *root*.

    Raises:
        ForbiddenPathError: if the result is outside the root, or if the
            path is absolute.
    """
    if PurePosixPath(relative_path.replace("\\", "/")).is_absolute() or Path(
        relative_path
    ).is_absolute():
        raise ForbiddenPathError("Access denied: path outside storage directory")

    root = root.resolve()
    candidate = (root / normalize_relative(relative_path)).resolve()
    if not is_safe_path(candidate, root):
        raise ForbiddenPathError("Access denied: path outside storage directory")
    return candidate


def to_relative(path: Path, root: Path) -> str:
    """Express *path* relative to *root* with ``/`` separators."""
    return path.relative_to(root).as_posix()
