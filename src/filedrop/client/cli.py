# Client CLI commands — ls, push, pull, rm, info, server-url.
# Created: 2026-10-19

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Confirm

from filedrop.client.api import FileDropClient
from filedrop.client.config import ClientConfig, JsonFileUrlStore
from filedrop.client.errors import FileDropClientError
from filedrop.client.notifications import Notification, NotificationLevel, Notifier
from filedrop.client.tree import TreeView, confirm_delete_message, format_size
from filedrop.client.uploads import UploadQueue

logger = logging.getLogger(__name__)

_STYLES = {
    NotificationLevel.SUCCESS: "green",
    NotificationLevel.INFO: "cyan",
    NotificationLevel.WARNING: "yellow",
    NotificationLevel.ERROR: "red",
}


def add_client_commands(subparsers: argparse._SubParsersAction) -> None:
    """Register the client subcommands on the main parser."""
    subparsers.add_parser("info", help="Show the configured server's identity")

    ls = subparsers.add_parser("ls", help="Show the server's file tree")
    ls.add_argument(
        "--collapse",
        action="append",
        default=[],
        metavar="FOLDER",
        help="Collapse a folder (relative path); repeatable",
    )
    ls.add_argument("--collapse-all", action="store_true", help="Show top-level entries only")

    push = subparsers.add_parser("push", help="Upload files or folders")
    push.add_argument("paths", nargs="+", type=Path, help="Files or folders to upload")
    push.add_argument("--yes", "-y", action="store_true", help="Overwrite without asking")

    pull = subparsers.add_parser("pull", help="Download a file")
    pull.add_argument("remote", help="Relative path on the server")
    pull.add_argument("dest", nargs="?", type=Path, default=Path("."), help="Target file or folder")

    rm = subparsers.add_parser("rm", help="Delete a file or folder on the server")
    rm.add_argument("remote", help="Relative path on the server")
    rm.add_argument("--yes", "-y", action="store_true", help="Delete without asking")

    url = subparsers.add_parser("server-url", help="Show, set, or reset the server URL")
    url_sub = url.add_subparsers(dest="action")
    url_sub.add_parser("show", help="Print the URL in use")
    set_cmd = url_sub.add_parser("set", help="Test and save a new URL")
    set_cmd.add_argument("url")
    url_sub.add_parser("reset", help="Go back to the default URL")


class ClientApp:
    """Wires config, client, notifier and console together for one CLI run."""

    def __init__(self, config: ClientConfig | None = None, console: Console | None = None):
        self.console = console or Console()
        self.config = config or ClientConfig(JsonFileUrlStore())
        self.client = FileDropClient(self.config)
        self.notifier = Notifier(on_notify=self._show)

    def _show(self, note: Notification) -> None:
        style = _STYLES[note.level]
        text = f"[{style}]{note.title}[/{style}]"
        if note.description:
            text += f" {escape(note.description)}"
        self.console.print(text)

    async def info(self, args: argparse.Namespace) -> int:
        data = await self.client.info()
        self.console.print(f"[bold]{data.get('message', '')}[/bold] v{data.get('version', '?')}")
        self.console.print(f"Server: {self.config.base_url}")
        if "maxFileSizeMB" in data:
            self.console.print(f"Max file size: {data['maxFileSizeMB']}MB")
        return 0

    async def ls(self, args: argparse.Namespace) -> int:
        view = TreeView(await self.client.list_files())
        if args.collapse_all:
            view.collapse_all()
        for folder in args.collapse:
            if view.is_expanded(folder):
                view.toggle(folder)
        self.console.print(view.render(title=self.config.base_url))
        return 0

    async def push(self, args: argparse.Namespace) -> int:
        queue = UploadQueue(self.client, self.notifier)
        for path in args.paths:
            if not path.exists():
                self.notifier.error("Not found", str(path))
                return 1
            queue.add(path)
        if not queue.items:
            self.notifier.notify("Nothing to upload", level=NotificationLevel.WARNING)
            return 0

        conflicts = await queue.check_conflicts()
        if conflicts and not args.yes:
            self.console.print("[yellow]These files already exist on the server:[/yellow]")
            for name in conflicts:
                self.console.print(f"  • {escape(name)}")
            if not Confirm.ask("Overwrite them?", console=self.console, default=False):
                self.notifier.notify("Upload cancelled")
                return 1

        with Progress(
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            label = f"Uploading {len(queue.items)} file(s), {format_size(queue.total_size)}"
            task = progress.add_task(label, total=100)
            try:
                await queue.start(on_progress=lambda pct: progress.update(task, completed=pct))
            except FileDropClientError:
                return 1
        queue.clear_finished()
        return 0

    async def pull(self, args: argparse.Namespace) -> int:
        target = await self.client.download(args.remote, args.dest)
        self.notifier.success("Download complete", str(target))
        return 0

    async def rm(self, args: argparse.Namespace) -> int:
        view = TreeView(await self.client.list_files())
        node = view.find(args.remote.strip("/"))
        if node is not None and not args.yes:
            prompt = escape(confirm_delete_message(node))
            if not Confirm.ask(prompt, console=self.console, default=False):
                return 1
        message = await self.client.delete(args.remote)
        self.notifier.success("Deleted", message)
        return 0

    async def server_url(self, args: argparse.Namespace) -> int:
        action = args.action or "show"
        if action == "set":
            saved = await self.config.save(args.url)
            self.notifier.success("Server URL saved", saved)
        elif action == "reset":
            self.config.reset()
            self.notifier.success("Server URL reset", self.config.base_url)
        else:
            self.console.print(self.config.base_url)
        return 0

    async def run(self, args: argparse.Namespace) -> int:
        handler = getattr(self, args.command.replace("-", "_"))
        try:
            return await handler(args)
        except FileDropClientError as e:
            self.notifier.error("Request failed", str(e))
            return 1
        except ValueError as e:
            self.notifier.error("Invalid input", str(e))
            return 1


def run_client_command(args: argparse.Namespace) -> int:
    return asyncio.run(ClientApp().run(args))
