# Common API response schemas.
# Created: 2026-10-19

from __future__ import annotations

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Base response wrapper."""

    model_config = {"from_attributes": True}

    success: bool = True


class ErrorResponse(APIResponse):
    """Standard error envelope."""

    success: bool = False
    message: str
    error: str | None = None


class MessageResponse(APIResponse):
    """Success with a human-readable message."""

    message: str


class ServerInfo(BaseModel):
    """Identity payload served at ``GET /``."""

    message: str
    version: str
    endpoints: dict[str, str]
    maxFileSizeMB: int
