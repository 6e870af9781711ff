"""FileDrop HTTP server.

Builds the FastAPI application (routers, CORS for localhost and private
networks, JSON error envelope) and runs it under uvicorn, bound to all
interfaces so other devices on the LAN can reach it.
"""

from __future__ import annotations

import logging
import re

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from filedrop import __version__
from filedrop.api import mount_routers
from filedrop.api.errors import register_exception_handlers
from filedrop.config import Settings, get_settings
from filedrop.storage import FileStore

logger = logging.getLogger(__name__)

# localhost plus the RFC 1918 private ranges, any port
PRIVATE_NETWORK_ORIGIN_REGEX = (
    r"^http://("
    r"localhost"
    r"|127\.0\.0\.1"
    r"|192\.168\.\d{1,3}\.\d{1,3}"
    r"|10\.\d{1,3}\.\d{1,3}\.\d{1,3}"
    r"|172\.(1[6-9]|2\d|3[01])\.\d{1,3}\.\d{1,3}"
    r")(:\d+)?$"
)
_ORIGIN_RE = re.compile(PRIVATE_NETWORK_ORIGIN_REGEX)


def is_allowed_origin(origin: str, extra_origins: list[str] | None = None) -> bool:
    """True if a browser at *origin* may call the API."""
    if extra_origins and origin in extra_origins:
        return True
    return _ORIGIN_RE.fullmatch(origin) is not None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application bound to one storage root."""
    settings = settings or get_settings()
    storage_root = settings.ensure_storage_dir()

    app = FastAPI(
        title="FileDrop API",
        description="Local-network file transfer: upload, browse, download, delete.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.store = FileStore(storage_root, max_file_size_mb=settings.max_file_size_mb)

    # --- CORS -----------------------------------------------------------
    extra_origins = list(settings.cors_allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=extra_origins,
        allow_origin_regex=PRIVATE_NETWORK_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_rejected_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and not is_allowed_origin(origin, extra_origins):
            logger.warning("CORS: rejected request from %s", origin)
        return await call_next(request)

    register_exception_handlers(app)
    mount_routers(app)

    logger.debug("Storage directory: %s", storage_root)
    return app


def _print_banner(settings: Settings) -> None:
    from filedrop.network import get_local_ip_addresses

    port = settings.port
    print("\n" + "=" * 50)
    print("\U0001f4e6 FILEDROP FILE TRANSFER SERVER")
    print("=" * 50)
    print(f"\n\U0001f4c1 Storage directory: {settings.storage_dir.resolve()}")
    print(f"\U0001f4cf Max file size: {settings.max_file_size_mb}MB")
    print("\n\U0001f310 Local access:")
    print(f"   http://localhost:{port}")
    print(f"   http://127.0.0.1:{port}")

    addresses = get_local_ip_addresses()
    if addresses:
        print("\n\U0001f517 LAN access:")
        for ip in addresses:
            print(f"   http://{ip}:{port}")
        print("\n\U0001f4a1 Other devices on your network can use the LAN addresses above")
    else:
        print("\n⚠️  No LAN IP address detected")

    print("\n\U0001f4cb API endpoints:")
    print("   GET    /                         - server info")
    print("   POST   /api/check-files          - conflict check")
    print("   POST   /api/upload               - upload files")
    print("   GET    /api/files                - file tree")
    print("   GET    /api/download/<path>      - download a file")
    print("   DELETE /api/files/<path>         - delete a file or folder\n")


def run_server(settings: Settings | None = None) -> int:
    """Start the server; returns a process exit code."""
    import uvicorn

    from filedrop.network import is_port_in_use

    settings = settings or get_settings()
    if is_port_in_use(settings.port):
        logger.error(
            "Port %d is already in use. Stop the other process or pick another with --port.",
            settings.port,
        )
        return 1

    app = create_app(settings)
    _print_banner(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0
