"""Pytest configuration and fixtures for the tea garden API tests.

Every test gets a fresh SQLite database (aiosqlite) with the full schema,
an HTTP client wired to it, and an uploads directory under ``tmp_path``.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.config import settings
from app.database import Base, get_db
from app.main import app

TEST_USERNAME = "gardener"
TEST_PASSWORD = "secret123"


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create a throwaway SQLite database with every table."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting rows; tests commit what the API must see."""
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def uploads_dir(tmp_path, monkeypatch):
    """Point uploads at a temporary directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "uploads_dir", str(path))
    return path


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the database dependency pointed at SQLite.

    Mirrors ``get_db``: commit after the handler, roll back when it raises.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Authentication ───────────────────────────────────────────────

@pytest_asyncio.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client holding a logged-in session cookie."""
    response = await client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201

    response = await client.post(
        "/api/auth/login",
        json={"username": TEST_USERNAME, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    return client


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: API endpoint tests")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "integration: Integration tests")
