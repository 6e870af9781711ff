# Upload queue — files picked for upload, sent as one batch.
# Created: 2026-10-19
#
# The batch shares a single fate: one aggregate progress value is broadcast
# to every item, and success or failure marks all of them at once.

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from filedrop.client.errors import FileDropClientError

if TYPE_CHECKING:
    from filedrop.client.api import FileDropClient
    from filedrop.client.notifications import Notifier

logger = logging.getLogger(__name__)


class UploadStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass
class UploadItem:
    """A local file waiting to be uploaded to ``relative_path``."""

    path: Path
    relative_path: str
    id: str = field(default_factory=_new_id)
    status: UploadStatus = UploadStatus.PENDING
    progress: int = 0

    @property
    def size(self) -> int:
        return self.path.stat().st_size


class UploadQueue:
    def __init__(self, client: FileDropClient, notifier: Notifier | None = None):
        self.client = client
        self.notifier = notifier
        self.items: list[UploadItem] = []

    def add_file(self, path: Path, relative_path: str | None = None) -> UploadItem:
        item = UploadItem(path=path, relative_path=relative_path or path.name)
        self.items.append(item)
        return item

    def add_folder(self, folder: Path) -> list[UploadItem]:
        """Queue every file under *folder*, keeping ``<folder>/<sub>/...`` paths."""
        folder = folder.resolve()
        added = []
        for path in sorted(p for p in folder.rglob("*") if p.is_file()):
            relative = (Path(folder.name) / path.relative_to(folder)).as_posix()
            added.append(self.add_file(path, relative))
        return added

    def add(self, path: Path) -> list[UploadItem]:
        if path.is_dir():
            return self.add_folder(path)
        return [self.add_file(path)]

    def remove(self, item_id: str) -> bool:
        for item in self.items:
            if item.id == item_id:
                self.items.remove(item)
                return True
        return False

    def clear(self) -> None:
        self.items.clear()

    def clear_finished(self) -> None:
        self.items = [i for i in self.items if i.status is not UploadStatus.SUCCESS]

    @property
    def relative_paths(self) -> list[str]:
        return [i.relative_path for i in self.items]

    @property
    def total_size(self) -> int:
        return sum(i.size for i in self.items)

    async def check_conflicts(self) -> list[str]:
        return await self.client.check_conflicts(self.relative_paths)

    async def start(
        self, on_progress: Callable[[int], None] | None = None
    ) -> list[dict[str, Any]]:
        """Upload every queued item in one request.

        The batch percentage is copied to every item and passed on to
        *on_progress*.

        Raises:
            FileDropClientError: the batch failed; every item is marked
                ``error`` and one notification is emitted first.
        """
        if not self.items:
            return []

        for item in self.items:
            item.status = UploadStatus.UPLOADING
            item.progress = 0

        def broadcast(percent: int) -> None:
            for item in self.items:
                item.progress = percent
            if on_progress is not None:
                on_progress(percent)

        try:
            results = await self.client.upload(self.items, on_progress=broadcast)
        except FileDropClientError as e:
            for item in self.items:
                item.status = UploadStatus.ERROR
            if self.notifier:
                self.notifier.error("Upload failed", str(e))
            else:
                logger.error("Upload of %d file(s) failed: %s", len(self.items), e)
            raise

        for item in self.items:
            item.status = UploadStatus.SUCCESS
            item.progress = 100
        if self.notifier:
            self.notifier.success("Upload complete", f"Uploaded {len(self.items)} file(s)")
        return results
