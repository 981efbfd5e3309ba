from pathlib import Path

from metastrip.config.settings import Settings
from metastrip.session.base import BaseSessionStore
from metastrip.session.file_store import FileSessionStore
from metastrip.session.memory_store import MemorySessionStore
from metastrip.session.postgres_store import PostgresSessionStore


class SessionStoreFactory:
    """Creates the session store backend selected in settings."""

    BACKENDS = ("file", "memory", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseSessionStore:
        backend = settings.session_store_backend.lower()
        if backend == "file":
            return FileSessionStore(Path(settings.session_file_path))
        if backend == "memory":
            return MemorySessionStore()
        if backend == "postgres":
            return PostgresSessionStore(settings.session_slot_key)
        raise ValueError(
            f"Unknown session store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
