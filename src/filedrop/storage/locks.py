# Advisory per-path locks — serialize writes and deletes on the same path.
# Created: 2026-10-19
#
# In-process only. Two uploads (or an upload and a delete) addressing the
# same relative path wait for each other instead of racing on the disk.
# The check-files → upload gap between two client requests is not covered.

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class PathLockMap:
    """Map of relative path → asyncio.Lock, created on demand.

    Entries are dropped as soon as no task holds or waits on them, so the
    map never grows beyond the number of paths in flight.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, path: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(path, asyncio.Lock())
        self._users[path] = self._users.get(path, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[path] -= 1
            if self._users[path] == 0:
                del self._users[path]
                del self._locks[path]

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, path: object) -> bool:
        return path in self._locks
