"""FileDrop entry point.

``filedrop`` (or ``filedrop serve``) starts the server; the other
subcommands are a terminal client for a running server.
"""

import argparse
import logging
import sys

from filedrop import __version__
from filedrop.client.cli import add_client_commands, run_client_command
from filedrop.config import Settings
from filedrop.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filedrop",
        description="📦 FileDrop - drag-and-drop file transfer for your local network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  filedrop                               Start the server (default)
  filedrop serve --port 8080             Start the server on another port
  filedrop serve --max-file-size 500     Allow files up to 500MB
  filedrop ls                            Show the server's file tree
  filedrop push photos/ notes.txt        Upload a folder and a file
  filedrop pull photos/cat.jpg           Download a file
  filedrop rm photos                     Delete a folder (asks first)
  filedrop server-url set 192.168.1.20:3001
""",
    )
    parser.add_argument(
        "--version", "-v", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: INFO for the server, WARNING for client commands)",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Start the file transfer server")
    serve.add_argument("--host", default=None, help="Interface to bind (default: 0.0.0.0)")
    serve.add_argument(
        "--port", "-p", type=int, default=None, help="Port (default: 3001, or $PORT)"
    )
    serve.add_argument(
        "--storage-dir", default=None, help="Where uploads are stored (default: ./uploads)"
    )
    serve.add_argument(
        "--max-file-size",
        type=int,
        default=None,
        metavar="MB",
        help="Per-file upload limit in MB (default: 100, or $MAX_FILE_SIZE_MB)",
    )

    add_client_commands(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "serve"):
        settings = Settings.load(
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            storage_dir=getattr(args, "storage_dir", None),
            max_file_size_mb=getattr(args, "max_file_size", None),
            log_level=args.log_level,
        )
        setup_logging(level=settings.log_level)

        from filedrop.api.app import run_server

        try:
            return run_server(settings)
        except KeyboardInterrupt:
            logger.info("👋 FileDrop stopped")
            return 0

    setup_logging(level=args.log_level or "WARNING")
    return run_client_command(args)


if __name__ == "__main__":
    sys.exit(main())
