# Exception handlers — map every failure to the {success:false, ...} envelope.
# Created: 2026-10-19
#
# Nothing raised inside a request handler may take the process down: storage
# errors keep their own status, framework errors are reshaped, anything else
# becomes a logged 500.

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filedrop.storage.errors import StorageError

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, error: str | None = None, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    if error:
        body["error"] = error
    body.update(extra)
    return JSONResponse(body, status_code=status_code)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc
        )
    else:
        logger.warning(
            "%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message
        )
    return _envelope(exc.status_code, exc.message, exc.kind, **exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, detail)
    return _envelope(400, detail, "ValidationError")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error in %s %s", request.method, request.url.path)
    return _envelope(500, "Internal server error", "InternalError")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
