import asyncio
from abc import ABC, abstractmethod
from pathlib import Path, PurePath

from metastrip.orchestrator.exceptions import DownloadError

CLEANED_PREFIX = "cleaned_"


def cleaned_filename(original_name: str) -> str:
    """Derive the save-as name of a stripped copy."""
    base = PurePath(original_name.replace("\\", "/")).name or "image"
    return f"{CLEANED_PREFIX}{base}"


class BaseDownloadSink(ABC):
    """Destination for the stripped copies the user downloads."""

    @abstractmethod
    async def save(self, filename: str, content: bytes) -> Path:
        """Store ``content`` under ``filename`` and return where it went.

        Raises:
            DownloadError: if the content cannot be stored.
        """


class DirectoryDownloadSink(BaseDownloadSink):
    """Writes downloads into a local directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    async def save(self, filename: str, content: bytes) -> Path:
        target = self._directory / filename
        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as exc:
            raise DownloadError(f"Could not save {filename}: {exc}") from exc
        return target

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
