# API router aggregation.
# Created: 2026-10-19
#
# mount_routers(app) registers every domain router on the app. Routers carry
# their own path prefixes (/ for info, /api for files).

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Domain routers — imported inside mount_routers() so importing the package stays cheap.
_ROUTERS: list[tuple[str, str, str]] = [
    # (module_path, attr_name, tag)
    ("filedrop.api.routers.info", "router", "Info"),
    ("filedrop.api.routers.files", "router", "Files"),
]


def mount_routers(app: FastAPI) -> None:
    """Mount all domain routers on *app*."""
    import importlib

    from fastapi import APIRouter

    for module_path, attr_name, tag in _ROUTERS:
        mod = importlib.import_module(module_path)
        router: APIRouter = getattr(mod, attr_name)
        app.include_router(router)
        logger.debug("Mounted router: %s (%s)", module_path, tag)
