# Upload handler — persist multipart parts under their relative paths.
# Created: 2026-10-19
#
# Folder uploads keep their structure: each part may carry a relative path
# such as ``docs/sub/b.txt`` and the intermediate folders are created on
# demand. Existing files are always overwritten; the conflict check is a
# client-side courtesy, not a server guarantee.

from __future__ import annotations

import logging
import mimetypes
import os
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, BinaryIO

from filedrop.storage.errors import FileTooLargeError, StorageIOError, ValidationError
from filedrop.storage.paths import TEMP_PREFIX, normalize_relative, resolve_within_root, to_relative

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def decode_filename(name: str) -> str:
    """Undo a latin-1 mis-decoding of a UTF-8 filename.

    Multipart filenames are raw bytes on the wire; some stacks decode them
    as latin-1, turning ``报告.txt`` into ``æ\\x8a¥å\\x91\\x8a.txt``. If the
    name survives a latin-1 → UTF-8 round trip it was mis-decoded and is
    repaired; otherwise (already proper text, or genuine latin-1) it is
    returned unchanged.
    """
    try:
        return name.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return name


def _basename(name: str) -> str:
    return name.replace("\\", "/").rsplit("/", 1)[-1]


def target_relative_path(filename: str, relative_path: str | None) -> str:
    """Pick where a part lands: its relative path if it names a subfolder,
    otherwise the bare filename at the root."""
    if relative_path:
        normalized = normalize_relative(decode_filename(relative_path))
        if normalized and normalized != filename:
            return normalized
    return filename


@dataclass
class IncomingFile:
    """One multipart file part, independent of the web framework."""

    filename: str
    stream: BinaryIO
    content_type: str | None = None
    relative_path: str | None = None
    size: int | None = None


def plan_target(part: IncomingFile) -> tuple[str, str]:
    """Return the repaired original filename and the relative path it will be
    stored at, before any filesystem access."""
    original_name = _basename(decode_filename(part.filename or "")) or "upload"
    return original_name, target_relative_path(original_name, part.relative_path)


@dataclass
class UploadResult:
    original_name: str
    filename: str
    relative_path: str
    full_path: str
    size: int
    mimetype: str
    upload_time: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalName": self.original_name,
            "filename": self.filename,
            "relativePath": self.relative_path,
            "fullPath": self.full_path,
            "size": self.size,
            "mimetype": self.mimetype,
            "uploadTime": self.upload_time.isoformat(),
        }


def _ensure_parent(target: Path, relative: str) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except (FileExistsError, NotADirectoryError) as e:
        raise ValidationError(
            f"Cannot create folder for {relative}: a file is in the way", path=relative
        ) from e
    except OSError as e:
        raise StorageIOError(f"Cannot create folder: {e.strerror or e}", path=relative) from e


def _stream_to(target: Path, stream: BinaryIO, name: str, max_bytes: int, limit_mb: int) -> int:
    fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=target.parent)
    written = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while chunk := stream.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise FileTooLargeError(name, limit_mb)
                out.write(chunk)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return written


def save_part(root: Path, part: IncomingFile, *, max_file_size_mb: int) -> UploadResult:
    """Write one part to disk and describe where it went.

    Raises:
        FileTooLargeError: the part is larger than ``max_file_size_mb``.
        ForbiddenPathError: its relative path escapes the storage root.
        ValidationError: the target is an existing directory, or a file
            blocks one of its folders.
        StorageIOError: the filesystem refused the write.
    """
    root = root.resolve()
    original_name, relative = plan_target(part)
    max_bytes = max_file_size_mb * 1024 * 1024

    if part.size is not None and part.size > max_bytes:
        raise FileTooLargeError(original_name, max_file_size_mb)

    target = resolve_within_root(root, relative)
    if target == root:
        raise ValidationError("Invalid upload path", path=relative)
    relative = to_relative(target, root)
    if target.is_dir():
        raise ValidationError(f"A folder already exists at {relative}", path=relative)

    _ensure_parent(target, relative)
    try:
        size = _stream_to(target, part.stream, original_name, max_bytes, max_file_size_mb)
    except IsADirectoryError as e:
        raise ValidationError(f"A folder already exists at {relative}", path=relative) from e
    except OSError as e:
        raise StorageIOError(f"Failed to save {relative}: {e.strerror or e}", path=relative) from e

    mimetype = (
        part.content_type
        or mimetypes.guess_type(original_name)[0]
        or "application/octet-stream"
    )
    return UploadResult(
        original_name=original_name,
        filename=target.name,
        relative_path=relative,
        full_path=f"{root.name}/{relative}",
        size=size,
        mimetype=mimetype,
        upload_time=datetime.now(tz=UTC),
    )
