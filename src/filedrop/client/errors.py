"""Client-side error types."""

from __future__ import annotations

import httpx


class FileDropClientError(Exception):
    """Base class for errors surfaced by the FileDrop client."""


class ServerConnectionError(FileDropClientError):
    """The configured server could not be reached."""

    def __init__(self, url: str, reason: str = ""):
        message = f"Cannot connect to server at {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.url = url


class FileDropAPIError(FileDropClientError):
    """The server answered with ``{success: false, ...}`` or an error status."""

    def __init__(self, status_code: int, message: str, kind: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.kind = kind

    @classmethod
    def from_response(cls, response: httpx.Response) -> FileDropAPIError:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or response.reason_phrase
            kind = body.get("error")
        else:
            message = response.reason_phrase or f"HTTP {response.status_code}"
            kind = None
        return cls(response.status_code, message, kind)
