import asyncio
import json
import os
import tempfile
from pathlib import Path

from metastrip.session.base import BaseSessionStore
from metastrip.session.exceptions import PersistenceError


class FileSessionStore(BaseSessionStore):
    """Stores the slot as a JSON file, replaced atomically on every save."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    async def _write(self, record: dict[str, object]) -> None:
        try:
            payload = json.dumps(record)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Session record is not serializable: {exc}") from exc
        try:
            await asyncio.to_thread(self._replace, payload)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self._path}: {exc}") from exc

    async def _read(self) -> object | None:
        try:
            text = await asyncio.to_thread(self._read_text)
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self._path}: {exc}") from exc
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt session file {self._path}: {exc}") from exc

    async def _delete(self) -> None:
        try:
            await asyncio.to_thread(self._path.unlink, missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot remove {self._path}: {exc}") from exc

    def _replace(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_text(self) -> str | None:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")
