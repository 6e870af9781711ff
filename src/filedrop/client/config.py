# Client configuration — which server the client talks to, and where that is saved.
# Created: 2026-10-19
#
# The base URL is resolved as FILEDROP_SERVER_URL > saved URL > default.
# Persistence goes through an injected ServerUrlStore so tests and other
# front ends can swap the JSON file for something else.

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path
from typing import Protocol

import httpx

from filedrop.client.errors import ServerConnectionError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:3001"
SERVER_URL_ENV = "FILEDROP_SERVER_URL"


class ServerUrlStore(Protocol):
    """Persistence for the user's chosen server URL."""

    def load(self) -> str | None: ...

    def save(self, url: str) -> None: ...

    def clear(self) -> None: ...


class MemoryUrlStore:
    """Keeps the URL in memory only."""

    def __init__(self, url: str | None = None):
        self._url = url

    def load(self) -> str | None:
        return self._url

    def save(self, url: str) -> None:
        self._url = url

    def clear(self) -> None:
        self._url = None


class JsonFileUrlStore:
    """Stores the URL in ``client.json`` under the FileDrop config dir.

    The file is chmod 0600 (owner-only read/write).
    """

    def __init__(self, path: Path | None = None):
        self._path = path

    @property
    def path(self) -> Path:
        if self._path is None:
            from filedrop.config import get_config_dir

            self._path = get_config_dir() / "client.json"
        return self._path

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Failed to read %s: %s", self.path, e)
            return None
        url = data.get("serverUrl") if isinstance(data, dict) else None
        return url if isinstance(url, str) and url else None

    def save(self, url: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"serverUrl": url}, indent=2), encoding="utf-8")
        os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)
        logger.info("Saved server URL %s", url)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Cleared saved server URL")


def normalize_url(url: str) -> str:
    """Trim, default the scheme to http, and drop trailing slashes."""
    url = url.strip()
    if not url:
        raise ValueError("Server URL is empty")
    if not url.startswith(("http://", "https://")):
        url = f"http://{url}"
    return url.rstrip("/")


class ClientConfig:
    """Explicit client configuration, passed to whatever issues requests.

    Holds an optional *draft* URL while the user edits it: ``save()`` tests
    and persists the draft, ``cancel()`` throws it away.
    """

    def __init__(
        self,
        store: ServerUrlStore,
        default_url: str = DEFAULT_SERVER_URL,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.store = store
        self.default_url = default_url
        self.transport = transport
        self.draft: str | None = None

    @property
    def base_url(self) -> str:
        env_url = os.environ.get(SERVER_URL_ENV)
        if env_url:
            return normalize_url(env_url)
        return normalize_url(self.store.load() or self.default_url)

    def edit(self, url: str) -> None:
        self.draft = url

    def cancel(self) -> None:
        self.draft = None

    async def test_connection(self, url: str | None = None, timeout: float = 5.0) -> bool:
        """GET ``/`` on *url* (default: the current base URL); True on a 2xx."""
        target = normalize_url(url) if url else self.base_url
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                resp = await client.get(f"{target}/")
        except httpx.HTTPError as e:
            logger.warning("Connection test to %s failed: %s", target, e)
            return False
        return resp.is_success

    async def save(self, url: str | None = None) -> str:
        """Test *url* (or the draft) and persist it if the server answers.

        Raises:
            ValueError: no URL given and no draft pending.
            ServerConnectionError: the server did not answer.
        """
        candidate = url if url is not None else self.draft
        if candidate is None:
            raise ValueError("No server URL to save")
        normalized = normalize_url(candidate)
        if not await self.test_connection(normalized):
            raise ServerConnectionError(normalized)
        self.store.save(normalized)
        self.draft = None
        return normalized

    def reset(self) -> None:
        """Forget the saved URL and fall back to the default."""
        self.store.clear()
        self.draft = None
