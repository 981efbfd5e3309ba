import asyncio
import mimetypes
from pathlib import Path

from metastrip.codec.models import ImageFile
from metastrip.pickers.base import BaseFilePicker
from metastrip.pickers.exceptions import PickerError


class LocalFilePicker(BaseFilePicker):
    """Reads a file the user pointed at on the local filesystem."""

    def __init__(self, path: Path) -> None:
        self._path = path

    async def choose(self) -> ImageFile | None:
        try:
            content, mtime = await asyncio.to_thread(self._read)
        except OSError as exc:
            raise PickerError(f"Cannot read {self._path}: {exc}") from exc
        mime_type, _ = mimetypes.guess_type(self._path.name)
        return ImageFile(
            name=self._path.name,
            mime_type=mime_type or "",
            content=content,
            last_modified=int(mtime * 1000),
        )

    def _read(self) -> tuple[bytes, float]:
        return self._path.read_bytes(), self._path.stat().st_mtime
