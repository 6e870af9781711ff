# FileDrop HTTP client — the requests the UI issues, over httpx.
# Created: 2026-10-19

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from filedrop.api.schemas.files import TreeNode
from filedrop.client.errors import FileDropAPIError, ServerConnectionError

if TYPE_CHECKING:
    from filedrop.client.config import ClientConfig
    from filedrop.client.uploads import UploadItem

logger = logging.getLogger(__name__)

_TREE = TypeAdapter(list[TreeNode])

ProgressCallback = Callable[[int], None]


class _ProgressStream(httpx.AsyncByteStream):
    """Wraps a request body and reports the percentage sent so far."""

    def __init__(self, inner: httpx.AsyncByteStream, total: int, on_progress: ProgressCallback):
        self._inner = inner
        self._total = total
        self._on_progress = on_progress
        self._sent = 0
        self._last = -1

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._inner:
            self._sent += len(chunk)
            if self._total:
                percent = min(100, round(self._sent * 100 / self._total))
                if percent != self._last:
                    self._last = percent
                    self._on_progress(percent)
            yield chunk

    async def aclose(self) -> None:
        await self._inner.aclose()


def _encode_path(relative_path: str) -> str:
    return quote(relative_path.strip("/"), safe="/")


class FileDropClient:
    """Async client for the FileDrop HTTP API.

    Every call opens a short-lived ``httpx.AsyncClient`` against the
    config's current base URL, so a URL change takes effect on the next call.
    """

    def __init__(self, config: ClientConfig, *, timeout: float = 30.0):
        self.config = config
        self.timeout = timeout

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=timeout if timeout is not None else self.timeout,
            transport=self.config.transport,
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        base_url = self.config.base_url
        try:
            async with self._client() as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise ServerConnectionError(base_url, str(e)) from e
        if resp.is_error:
            raise FileDropAPIError.from_response(resp)
        return resp

    async def info(self) -> dict[str, Any]:
        resp = await self._send("GET", "/")
        return resp.json()

    async def check_conflicts(self, relative_paths: list[str]) -> list[str]:
        """Relative paths that already exist on the server."""
        resp = await self._send("POST", "/api/check-files", json={"fileNames": relative_paths})
        return resp.json().get("conflicts", [])

    async def list_files(self) -> list[TreeNode]:
        resp = await self._send("GET", "/api/files")
        return _TREE.validate_python(resp.json().get("files", []))

    async def delete(self, relative_path: str) -> str:
        resp = await self._send("DELETE", f"/api/files/{_encode_path(relative_path)}")
        return resp.json().get("message", "")

    async def upload(
        self,
        items: list[UploadItem],
        on_progress: ProgressCallback | None = None,
    ) -> list[dict[str, Any]]:
        """Send *items* as one multipart request.

        Each file goes in a ``files`` part; its relative path rides along in
        ``relativePath_<index>``. *on_progress* receives the percentage of the
        whole request body sent so far.
        """
        base_url = self.config.base_url
        data = {f"relativePath_{i}": item.relative_path for i, item in enumerate(items)}

        with ExitStack() as stack:
            files = [
                ("files", (item.path.name, stack.enter_context(item.path.open("rb"))))
                for item in items
            ]
            try:
                # No overall timeout: large batches may take a while on slow links
                async with self._client(timeout=None) as client:
                    request = client.build_request("POST", "/api/upload", data=data, files=files)
                    if on_progress is not None:
                        total = int(request.headers.get("content-length", 0))
                        request.stream = _ProgressStream(request.stream, total, on_progress)
                    resp = await client.send(request)
            except httpx.TransportError as e:
                raise ServerConnectionError(base_url, str(e)) from e

        if resp.is_error:
            raise FileDropAPIError.from_response(resp)
        body = resp.json()
        logger.info("Uploaded %d file(s) to %s", len(body.get("files", [])), base_url)
        return body.get("files", [])

    async def download(self, relative_path: str, dest: Path) -> Path:
        """Save a remote file to *dest* (a directory or a file path)."""
        target = dest / Path(relative_path).name if dest.is_dir() else dest
        base_url = self.config.base_url
        try:
            async with self._client() as client:
                async with client.stream(
                    "GET", f"/api/download/{_encode_path(relative_path)}"
                ) as resp:
                    if resp.is_error:
                        await resp.aread()
                        raise FileDropAPIError.from_response(resp)
                    with target.open("wb") as fh:
                        async for chunk in resp.aiter_bytes():
                            fh.write(chunk)
        except httpx.TransportError as e:
            raise ServerConnectionError(base_url, str(e)) from e
        logger.info("Downloaded %s to %s", relative_path, target)
        return target
