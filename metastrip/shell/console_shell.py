import asyncio
import shlex
from collections.abc import Awaitable, Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from metastrip.config.settings import Settings
from metastrip.logging.logger import Log
from metastrip.orchestrator.orchestrator import UploadOrchestrator
from metastrip.pickers.base import BaseFilePicker
from metastrip.pickers.dropbox_picker import DropboxPicker
from metastrip.pickers.google_drive_picker import GoogleDrivePicker
from metastrip.pickers.local_picker import LocalFilePicker
from metastrip.ratelimit.limiter import Operation
from metastrip.remote.base import BaseMetadataService
from metastrip.remote.exceptions import RemoteServiceError
from metastrip.remote.models import ImageMetadata

HELP_TEXT = """\
open <path>                      choose a local image
drive <file_id> <name> [mime]    choose an image picked in Google Drive
dropbox <link> [name]            choose an image from a Dropbox direct link
inspect                          show the metadata embedded in the image
strip                            download a copy without metadata
reset                            forget the current image
status                           show the current image and rate limits
health                           check the remote service
dismiss                          clear the current error
help                             show this help
quit                             leave the shell"""


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class ConsoleShell:
    """Interactive prompt loop driving one UploadOrchestrator."""

    def __init__(
        self,
        orchestrator: UploadOrchestrator,
        service: BaseMetadataService,
        settings: Settings,
        console: Console | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._service = service
        self._settings = settings
        self._console = console or Console()
        self._commands: dict[str, Callable[[list[str]], Awaitable[None]]] = {
            "open": self._open,
            "drive": self._drive,
            "dropbox": self._dropbox,
            "inspect": self._inspect,
            "strip": self._strip,
            "reset": self._reset,
            "status": self._status,
            "health": self._health,
            "dismiss": self._dismiss,
            "help": self._help,
        }

    async def run(self) -> None:
        """Read and execute commands until ``quit`` or end of input."""
        await self._status([])
        while True:
            try:
                line = await asyncio.to_thread(Prompt.ask, "[bold cyan]metastrip[/]")
            except (EOFError, KeyboardInterrupt):
                break
            if line.strip().lower() in ("quit", "exit"):
                break
            await self.execute(line)
        Log.info("Shell closed")

    async def execute(self, line: str) -> None:
        """Run one command line and print any error it left behind."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._console.print(f"[red]Cannot parse command: {escape(str(exc))}[/]")
            return
        if not parts:
            return
        handler = self._commands.get(parts[0].lower())
        if handler is None:
            self._console.print(f"[red]Unknown command '{escape(parts[0])}'. Type 'help'.[/]")
            return
        await handler(parts[1:])
        self._print_error()

    async def _open(self, args: list[str]) -> None:
        if len(args) != 1:
            self._console.print("usage: open <path>")
            return
        await self._select(LocalFilePicker(Path(args[0]).expanduser()))

    async def _drive(self, args: list[str]) -> None:
        if len(args) not in (2, 3):
            self._console.print("usage: drive <file_id> <name> [mime]", markup=False)
            return
        picker = GoogleDrivePicker(
            file_id=args[0],
            file_name=args[1],
            mime_type=args[2] if len(args) == 3 else "",
            access_token=self._settings.google_drive_access_token,
            timeout_seconds=self._settings.picker_timeout_seconds,
            max_size_bytes=self._settings.max_upload_size_bytes,
        )
        await self._select(picker)

    async def _dropbox(self, args: list[str]) -> None:
        if len(args) not in (1, 2):
            self._console.print("usage: dropbox <link> [name]", markup=False)
            return
        picker = DropboxPicker(
            link=args[0],
            file_name=args[1] if len(args) == 2 else "",
            timeout_seconds=self._settings.picker_timeout_seconds,
            max_size_bytes=self._settings.max_upload_size_bytes,
        )
        await self._select(picker)

    async def _select(self, picker: BaseFilePicker) -> None:
        if await self._orchestrator.select_from(picker):
            file = self._orchestrator.file
            if file is not None:
                self._console.print(
                    f"[green]Selected {escape(file.name)}[/] ({_format_size(file.size)})"
                )

    async def _inspect(self, args: list[str]) -> None:
        if self._orchestrator.file is None:
            self._console.print("No image selected. Use 'open' first.")
            return
        with self._console.status("Analyzing..."):
            metadata = await self._orchestrator.inspect()
        if metadata is not None:
            self._render_metadata(metadata)

    async def _strip(self, args: list[str]) -> None:
        if self._orchestrator.file is None:
            self._console.print("No image selected. Use 'open' first.")
            return
        with self._console.status("Removing metadata..."):
            path = await self._orchestrator.strip()
        if path is not None:
            self._console.print(f"[green]Clean copy saved to {escape(str(path))}[/]")

    async def _reset(self, args: list[str]) -> None:
        await self._orchestrator.reset()
        self._console.print("Image removed.")

    async def _status(self, args: list[str]) -> None:
        file = self._orchestrator.file
        if file is None:
            self._console.print("No image selected.")
        else:
            self._console.print(
                f"Current image: [bold]{escape(file.name)}[/] "
                f"({_format_size(file.size)}, {escape(file.mime_type)})"
            )
            if self._orchestrator.metadata is not None:
                self._render_metadata(self._orchestrator.metadata)
        for operation in Operation:
            limit = self._orchestrator.rate_limit_status(operation)
            line = f"{operation.value}: {limit.remaining} requests left"
            if limit.remaining <= 0 and limit.retry_after_seconds > 0:
                line += f", wait {limit.retry_after_seconds} seconds"
            self._console.print(line)

    async def _health(self, args: list[str]) -> None:
        try:
            message = await self._service.health()
        except RemoteServiceError as exc:
            self._console.print(f"[red]● {escape(str(exc))}[/]")
            return
        self._console.print(f"[green]● {escape(message)}[/]")

    async def _dismiss(self, args: list[str]) -> None:
        self._orchestrator.dismiss_error()

    async def _help(self, args: list[str]) -> None:
        self._console.print(HELP_TEXT, markup=False)

    def _print_error(self) -> None:
        error = self._orchestrator.error
        if error is not None:
            self._console.print(f"[bold red]Error:[/] {escape(str(error))}  [dim](type 'dismiss' to clear)[/]")

    def _render_metadata(self, metadata: ImageMetadata) -> None:
        self._console.print(
            f"[bold]{escape(metadata.file_name)}[/] {_format_size(metadata.file_size)} "
            f"{escape(metadata.mime_type)}"
        )
        if not metadata.has_metadata:
            self._console.print("No metadata found in this image.")
        for _, group in metadata.populated_groups():
            table = Table(title=escape(group.group_name))
            table.add_column("Field")
            table.add_column("Value")
            for key, value in group.data.items():
                table.add_row(escape(key), escape(value))
            self._console.print(table)
