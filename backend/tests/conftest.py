"""Shared test configuration, pytest markers and fixtures."""

import asyncio
import os

# Settings are read once at import time, so the environment must be
# prepared before anything imports config.
os.environ.setdefault("ADZUNA_APP_ID", "test-app-id")
os.environ.setdefault("ADZUNA_APP_KEY", "test-app-key")
os.environ.setdefault("HUGGINGFACE_TOKEN", "")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls real upstream services (HuggingFace, Adzuna, scoring API)"
    )


def _sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def session_factory(tmp_path):
    """Session factory over a throwaway SQLite file with tables created."""
    from db.base import init_db

    engine = create_async_engine(_sqlite_url(tmp_path), poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest_asyncio.fixture
async def db_session(tmp_path):
    """An AsyncSession for direct repository/service tests."""
    from db.base import init_db

    engine = create_async_engine(_sqlite_url(tmp_path), poolclass=NullPool)
    await init_db(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def client(session_factory):
    """TestClient with the database dependency pointed at a temp SQLite file.

    Used without a context manager, so the lifespan (table creation on the
    real database, Adzuna client construction) does not run.
    """
    from fastapi.testclient import TestClient

    from db.base import get_db
    from main import app

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def json_transport(payload, status_code: int = 200, calls: list | None = None) -> httpx.MockTransport:
    """MockTransport answering every request with the same JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)
