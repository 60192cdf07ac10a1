"""Pytest configuration and fixtures for docvault.

Uses docvault.main:app for HTTP tests and docvault.infrastructure.persistence.database
for DB-dependent fixtures. Settings need SECRET_KEY, so a test value is set
before the app is imported.
"""

import os
from collections.abc import AsyncIterator

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-docvault-tests-only")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from docvault.infrastructure.persistence import database  # noqa: E402
from docvault.infrastructure.security.jwt import create_access_token  # noqa: E402
from docvault.main import app  # noqa: E402
from tests.factories import make_document  # noqa: E402


@pytest.fixture
def document():
    return make_document()


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI). Clears dependency overrides after."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def bearer(identity: str) -> dict[str, str]:
    """Authorization header for the given identity id."""
    return {"Authorization": f"Bearer {create_access_token({'sub': identity})}"}


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return bearer("alice")


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return bearer("bob")


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated Postgres (alembic upgrade head).
    Skips when Postgres is not configured; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
