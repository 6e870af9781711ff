# Info router — server identity at GET /.
# Created: 2026-10-19

from __future__ import annotations

from fastapi import APIRouter, Depends

from filedrop import __version__
from filedrop.api.deps import get_app_settings
from filedrop.api.schemas.common import ServerInfo
from filedrop.config import Settings

router = APIRouter(tags=["Info"])

ENDPOINTS = {
    "checkFiles": "POST /api/check-files",
    "upload": "POST /api/upload",
    "files": "GET /api/files",
    "download": "GET /api/download/:relativePath",
    "delete": "DELETE /api/files/:relativePath",
}


@router.get("/", response_model=ServerInfo)
async def server_info(settings: Settings = Depends(get_app_settings)):
    """Identify the server; clients use this to test a configured URL."""
    return ServerInfo(
        message="File transfer server running",
        version=__version__,
        endpoints=ENDPOINTS,
        maxFileSizeMB=settings.max_file_size_mb,
    )
