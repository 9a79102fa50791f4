"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gpc.config import get_settings
from gpc.database import close_db, get_engine, get_session_factory, init_db
from gpc.db.base import Base
from gpc.store import RecordStore


@pytest.fixture(autouse=True)
def _test_settings(tmp_path, monkeypatch) -> None:
    """Point the app at a throwaway SQLite database."""
    monkeypatch.setenv("GPC_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/test.db")
    monkeypatch.setenv("GPC_LOG_FORMAT", "console")
    monkeypatch.setenv("GPC_ENVIRONMENT", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def store() -> AsyncGenerator[RecordStore, None]:
    """Record store over a freshly created schema."""
    await init_db(get_settings().database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield RecordStore(get_session_factory())
    await close_db()


@pytest_asyncio.fixture
async def client(store: RecordStore) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app; the database is already initialized."""
    from gpc.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
