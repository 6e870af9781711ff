# FileStore — async facade over the storage root used by the HTTP layer.
# Created: 2026-10-19
#
# Blocking filesystem work runs in worker threads. Writes and deletes take
# the advisory lock for their relative path first.

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from filedrop.storage.conflicts import find_conflicts
from filedrop.storage.errors import ForbiddenPathError, ValidationError
from filedrop.storage.locks import PathLockMap
from filedrop.storage.operations import delete_entry, resolve_download
from filedrop.storage.paths import normalize_relative, resolve_within_root, to_relative
from filedrop.storage.tree import Entry, EntryKind, build_tree
from filedrop.storage.uploads import IncomingFile, UploadResult, plan_target, save_part

logger = logging.getLogger(__name__)


class FileStore:
    """All operations on one storage root."""

    def __init__(self, root: Path, max_file_size_mb: int = 100):
        self.root = root.resolve()
        self.max_file_size_mb = max_file_size_mb
        self.locks = PathLockMap()

    def lock_key(self, relative_path: str) -> str:
        """Lock name for a path: its resolved location relative to the root,
        so every spelling of one file shares a lock."""
        try:
            return to_relative(resolve_within_root(self.root, relative_path), self.root)
        except ForbiddenPathError:
            return normalize_relative(relative_path)

    async def list_tree(self) -> list[Entry]:
        return await asyncio.to_thread(build_tree, self.root)

    async def check_conflicts(self, candidates: list) -> list[str]:
        return await asyncio.to_thread(find_conflicts, self.root, candidates)

    async def save_uploads(self, parts: list[IncomingFile]) -> list[UploadResult]:
        """Store a batch of parts in order.

        A failing part aborts the rest of the batch. Parts written before it
        stay on disk; there is no rollback.
        """
        if not parts:
            raise ValidationError("No files received")

        results: list[UploadResult] = []
        for part in parts:
            _, relative = plan_target(part)
            try:
                async with self.locks.hold(self.lock_key(relative)):
                    result = await asyncio.to_thread(
                        save_part, self.root, part, max_file_size_mb=self.max_file_size_mb
                    )
            except Exception:
                if results:
                    logger.warning(
                        "Upload batch aborted at %s; %d file(s) already stored were kept",
                        relative,
                        len(results),
                    )
                raise
            results.append(result)

        logger.info("Stored %d file(s)", len(results))
        for r in results:
            logger.info("  %s (%.2fMB)", r.relative_path, r.size / 1024 / 1024)
        return results

    async def resolve_download(self, relative_path: str) -> Path:
        return await asyncio.to_thread(resolve_download, self.root, relative_path)

    async def delete(self, relative_path: str) -> EntryKind:
        async with self.locks.hold(self.lock_key(relative_path)):
            return await asyncio.to_thread(delete_entry, self.root, relative_path)
