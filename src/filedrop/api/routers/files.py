# Files router — conflict check, upload, listing, download, delete.
# Created: 2026-10-19

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile

from filedrop.api.deps import get_store
from filedrop.api.schemas.common import ErrorResponse, MessageResponse
from filedrop.api.schemas.files import CheckFilesResponse, FileListResponse, UploadResponse
from filedrop.storage import EntryKind, FileStore, IncomingFile, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])

# Multipart field carrying the files, and the per-index relative path field.
FILES_FIELD = "files"
RELATIVE_PATH_FIELD = "relativePath_{index}"

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/check-files", response_model=CheckFilesResponse, responses=_ERRORS)
async def check_files(request: Request, store: FileStore = Depends(get_store)):
    """Report which of ``fileNames`` already exist, so the client can ask
    before overwriting."""
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None

    names = data.get("fileNames") if isinstance(data, dict) else None
    if not isinstance(names, list):
        raise ValidationError("fileNames must be an array of relative paths")

    conflicts = await store.check_conflicts(names)
    if conflicts:
        logger.info("Conflict check: %d of %d already exist", len(conflicts), len(names))
    return CheckFilesResponse(conflicts=conflicts)


@router.post("/upload", response_model=UploadResponse, responses=_ERRORS)
async def upload_files(request: Request, store: FileStore = Depends(get_store)):
    """Store every ``files`` part, at ``relativePath_<i>`` when given."""
    async with request.form(max_files=10_000, max_fields=10_000) as form:
        uploads = [f for f in form.getlist(FILES_FIELD) if isinstance(f, UploadFile)]
        parts = []
        for index, upload in enumerate(uploads):
            relative_path = form.get(RELATIVE_PATH_FIELD.format(index=index))
            parts.append(
                IncomingFile(
                    filename=upload.filename or "",
                    stream=upload.file,
                    content_type=upload.content_type,
                    relative_path=relative_path if isinstance(relative_path, str) else None,
                    size=upload.size,
                )
            )
        results = await store.save_uploads(parts)

    return UploadResponse(
        message=f"Uploaded {len(results)} file(s)",
        files=[r.to_dict() for r in results],
    )


@router.get("/files", response_model=FileListResponse, responses=_ERRORS)
async def list_files(store: FileStore = Depends(get_store)):
    """The whole storage root as a nested tree."""
    entries = await store.list_tree()
    return FileListResponse(files=[e.to_dict() for e in entries])


@router.get("/download/{relative_path:path}", response_class=FileResponse, responses=_ERRORS)
async def download_file(relative_path: str, store: FileStore = Depends(get_store)):
    path = await store.resolve_download(relative_path)
    logger.info("Download: %s", relative_path)
    return FileResponse(path, filename=path.name)


@router.delete("/files/{relative_path:path}", response_model=MessageResponse, responses=_ERRORS)
async def delete_file(relative_path: str, store: FileStore = Depends(get_store)):
    """Delete a file, or a folder with everything in it."""
    kind = await store.delete(relative_path)
    if kind is EntryKind.DIRECTORY:
        return MessageResponse(message="Folder deleted")
    return MessageResponse(message="File deleted")
