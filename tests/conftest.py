"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from pathlib import Path

os.environ.setdefault("SB_SECRET_KEY", "test-secret-key-with-enough-entropy-0123456789")
os.environ.setdefault("SB_LOG_FORMAT", "console")
os.environ.setdefault("SB_LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from skillbuilder.catalog.seed import seed_material_types  # noqa: E402
from skillbuilder.config import get_settings  # noqa: E402
from skillbuilder.database import close_db, get_engine, get_session_factory, init_db  # noqa: E402
from skillbuilder.db import Base, User  # noqa: E402
from skillbuilder.main import create_app  # noqa: E402

TEST_PASSWORD = "Str0ngPassword"


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """A fresh file-backed SQLite database with the full schema and seeded types."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'skillbuilder.db'}"
    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with get_session_factory()() as session:
        await seed_material_types(session)
    yield url
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: str) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the ASGI app, bound to the test database."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def make_user(db: AsyncSession, login: str) -> User:
    """Insert a user row directly (no password hashing round-trip needed)."""
    user = User(login=login, password_hash="not-a-real-hash")
    db.add(user)
    await db.commit()
    return user


async def register(client: AsyncClient, login: str, password: str = TEST_PASSWORD) -> tuple[str, dict[str, str]]:
    """Register over HTTP. Returns the user id and headers carrying its session cookie.

    The client's own cookie jar is cleared so several users can share one client.
    """
    response = await client.post("/api/v1/user/register", json={"login": login, "password": password})
    assert response.status_code == 201, response.text
    data = response.json()
    client.cookies.clear()
    return data["id"], {"Cookie": f"token={data['token']}"}


@pytest_asyncio.fixture
async def alice(client: AsyncClient) -> tuple[str, dict[str, str]]:
    return await register(client, "alice")


@pytest_asyncio.fixture
async def bob(client: AsyncClient) -> tuple[str, dict[str, str]]:
    return await register(client, "bob")
