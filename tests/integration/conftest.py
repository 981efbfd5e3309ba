import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from metastrip.config.settings import Settings
from metastrip.database.connection import close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "metastrip_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest_asyncio.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        await close_pool()


@pytest_asyncio.fixture
async def slot_key(integration_pool: None) -> AsyncGenerator[str, None]:
    key = f"test-{os.getpid()}"
    yield key
    async with get_connection() as conn:
        await conn.execute("DELETE FROM session_slots WHERE slot_key = %s", (key,))
        await conn.commit()
