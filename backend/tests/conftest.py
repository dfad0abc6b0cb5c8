"""Shared test configuration and fixtures.

Uses a throwaway SQLite file per test plus a transaction that always rolls
back, so tests never see each other's rows and need no running database.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from helpers import make_room
from studiorent.auth.jwt import create_admin_token
from studiorent.auth.passwords import hash_password
from studiorent.config import settings
from studiorent.database import Base, enable_sqlite_foreign_keys, get_db
from studiorent.main import app
from studiorent.models import Guest, Room

ADMIN_PASSWORD = "correct-horse-battery"


# ---------------------------------------------------------------------------
# Per-test database: fresh schema, transactional rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Admin auth
# ---------------------------------------------------------------------------


@pytest.fixture
def admin_password(monkeypatch) -> str:
    """Configure the admin password hash for the duration of a test."""
    monkeypatch.setattr(settings, "admin_password_hash", hash_password(ADMIN_PASSWORD))
    return ADMIN_PASSWORD


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_admin_token()}"}


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def room(db_session: AsyncSession) -> Room:
    """A studio at 4900 per 30 days."""
    return await make_room(db_session)


@pytest_asyncio.fixture
async def guest(db_session: AsyncSession) -> Guest:
    guest = Guest(
        full_name="Sara Al-Harbi",
        email="sara@example.com",
        phone="0531182200",
        id_type="saudi_id",
        id_number="1012345678",
        nationality="Saudi Arabia",
    )
    db_session.add(guest)
    await db_session.flush()
    return guest

