import psycopg
from psycopg.types.json import Jsonb

from metastrip.database.connection import get_connection
from metastrip.session.base import BaseSessionStore
from metastrip.session.exceptions import PersistenceError


class PostgresSessionStore(BaseSessionStore):
    """Keeps the slot as one row of the session_slots table."""

    def __init__(self, slot_key: str) -> None:
        super().__init__()
        self._slot_key = slot_key
        self._schema_ready = False

    async def _write(self, record: dict[str, object]) -> None:
        try:
            async with get_connection() as conn:
                await self._ensure_schema(conn)
                await conn.execute(
                    """
                    INSERT INTO session_slots (slot_key, payload, updated_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (slot_key)
                    DO UPDATE SET payload = EXCLUDED.payload, updated_at = NOW()
                    """,
                    (self._slot_key, Jsonb(record)),
                )
                await conn.commit()
        except (psycopg.Error, RuntimeError) as exc:
            raise PersistenceError(f"Cannot save session slot '{self._slot_key}': {exc}") from exc

    async def _read(self) -> object | None:
        try:
            async with get_connection() as conn:
                await self._ensure_schema(conn)
                cursor = await conn.execute(
                    "SELECT payload FROM session_slots WHERE slot_key = %s",
                    (self._slot_key,),
                )
                row = await cursor.fetchone()
        except (psycopg.Error, RuntimeError) as exc:
            raise PersistenceError(f"Cannot load session slot '{self._slot_key}': {exc}") from exc
        if row is None:
            return None
        return row[0]

    async def _delete(self) -> None:
        try:
            async with get_connection() as conn:
                await self._ensure_schema(conn)
                await conn.execute(
                    "DELETE FROM session_slots WHERE slot_key = %s",
                    (self._slot_key,),
                )
                await conn.commit()
        except (psycopg.Error, RuntimeError) as exc:
            raise PersistenceError(f"Cannot clear session slot '{self._slot_key}': {exc}") from exc

    async def _ensure_schema(self, conn: psycopg.AsyncConnection) -> None:
        if self._schema_ready:
            return
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS session_slots (
                slot_key TEXT PRIMARY KEY,
                payload JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        await conn.commit()
        self._schema_ready = True
