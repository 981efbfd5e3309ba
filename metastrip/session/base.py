import asyncio
from abc import ABC, abstractmethod

from metastrip.logging.logger import Log
from metastrip.session.exceptions import PersistenceError
from metastrip.session.models import Session


class BaseSessionStore(ABC):
    """Single-slot durable store for the current Session.

    The public operations never raise for backend failures: a failed save
    or clear is logged, and a failed or corrupt load reads as "no saved
    session". All operations on one store are applied in call order.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def save(self, session: Session) -> None:
        """Replace the slot with ``session``."""
        async with self._lock:
            try:
                await self._write(session.to_record())
            except PersistenceError as exc:
                Log.error(f"Error saving session: {exc}")

    async def load(self) -> Session | None:
        """Return the saved Session, or None if absent or unusable."""
        async with self._lock:
            try:
                record = await self._read()
            except PersistenceError as exc:
                Log.error(f"Error loading session: {exc}")
                return None
        if record is None:
            return None
        try:
            return Session.from_record(record)
        except ValueError as exc:
            Log.error(f"Discarding malformed saved session: {exc}")
            return None

    async def clear(self) -> None:
        """Empty the slot."""
        async with self._lock:
            try:
                await self._delete()
            except PersistenceError as exc:
                Log.error(f"Error clearing session: {exc}")

    @abstractmethod
    async def _write(self, record: dict[str, object]) -> None:
        """Persist the record atomically.

        Raises:
            PersistenceError: if the backend cannot store the record.
        """

    @abstractmethod
    async def _read(self) -> object | None:
        """Return the raw stored record, or None when the slot is empty.

        Raises:
            PersistenceError: if the backend cannot be read.
        """

    @abstractmethod
    async def _delete(self) -> None:
        """Remove the record; a missing record is not an error.

        Raises:
            PersistenceError: if the backend cannot be modified.
        """
