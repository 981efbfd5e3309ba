import json

from metastrip.session.base import BaseSessionStore
from metastrip.session.exceptions import PersistenceError


class MemorySessionStore(BaseSessionStore):
    """Process-local store; keeps the record as JSON text."""

    def __init__(self) -> None:
        super().__init__()
        self._payload: str | None = None

    async def _write(self, record: dict[str, object]) -> None:
        try:
            self._payload = json.dumps(record)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Session record is not serializable: {exc}") from exc

    async def _read(self) -> object | None:
        if self._payload is None:
            return None
        return json.loads(self._payload)

    async def _delete(self) -> None:
        self._payload = None
