"""
Jotter: Test Configuration (conftest.py)
==========================================

What:  Shared pytest fixtures for the test suite.
How:   A real SQLite database (aiosqlite) stands in for PostgreSQL; HTTP
       tests drive the app through httpx's ASGITransport, so no server
       is started.

Fixture Hierarchy:
    Function-scoped:
    ├── test_settings: Settings pointing at a fresh SQLite file
    ├── memory_store:  empty MemoryNoteStore
    ├── sql_store:     SqlNoteStore with the schema created
    ├── note_store:    parametrized over both backends
    ├── app:           application built from test_settings, started up
    └── test_client:   HTTPX AsyncClient bound to `app`
"""

import os
import tempfile
from pathlib import Path

# Must run before anything imports jotter.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="jotter_test_"), "default.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from jotter.config import Settings
from jotter.database import build_engine, build_session_factory, create_schema
from jotter.main import create_app
from jotter.services.memory_store import MemoryNoteStore
from jotter.services.sql_store import SqlNoteStore

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        static_dir=str(STATIC_DIR),
        log_level="WARNING",
    )


@pytest.fixture
def memory_store():
    return MemoryNoteStore()


@pytest_asyncio.fixture
async def sql_store(test_settings):
    engine = build_engine(test_settings)
    await create_schema(engine)
    yield SqlNoteStore(build_session_factory(engine))
    await engine.dispose()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def note_store(request, test_settings):
    """Runs the test once per store backend."""
    if request.param == "memory":
        yield MemoryNoteStore()
        return

    engine = build_engine(test_settings)
    await create_schema(engine)
    yield SqlNoteStore(build_session_factory(engine))
    await engine.dispose()


@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    # ASGITransport does not send lifespan events
    await application.state.context.startup()
    yield application
    await application.state.context.shutdown()


@pytest_asyncio.fixture
async def test_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
