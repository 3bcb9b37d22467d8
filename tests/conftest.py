"""Pytest configuration and fixtures for the settlement service.

Environment defaults are applied before arthub.main is imported so Settings
validation passes without a .env file. HTTP tests use arthub.main:app with
dependency overrides; DB-dependent fixtures skip when DATABASE_URL is unset.
"""

import os

# Hardhat's well-known first dev key; never funded on a real network.
os.environ.setdefault(
    "RELAYER_PRIVATE_KEY", "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
)
os.environ.setdefault("TREASURY_WALLET", "0x" + "7" * 40)
os.environ.setdefault("NETWORK", "base-sepolia")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from arthub.infrastructure.persistence import database  # noqa: E402
from arthub.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI, lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def session_factory():
    """Session factory for repository/integration tests.

    Skips when Postgres is not configured. Use @pytest.mark.requires_db to
    mark tests that need it; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    yield database.AsyncSessionLocal
    # Pooled asyncpg connections are bound to this test's event loop.
    await database.dispose_engine()


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Database session that rolls back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()
