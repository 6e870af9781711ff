# Shared FastAPI dependencies for the API layer.
# Created: 2026-10-19

from __future__ import annotations

from fastapi import Request

from filedrop.config import Settings
from filedrop.storage import FileStore


def get_store(request: Request) -> FileStore:
    """The FileStore bound to this app by ``create_app``."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
