"""
Transporter Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked sessions, a throwaway
       SQLite database, an API client bound to it).

Fixture Hierarchy (all function-scoped):
    ├── settings:          Validated Settings built from the env below
    ├── mock_db_session:   AsyncMock session for service unit tests
    ├── driver_payload / truck_payload: valid request bodies
    ├── database:          aiosqlite-backed Database with tables created
    └── test_client:       HTTPX AsyncClient talking to create_app(database)
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Required configuration for every test; individual tests remove keys with
# monkeypatch to exercise the missing-key paths.
os.environ["DATABASE_HOST"] = "localhost"
os.environ["DATABASE_PORT"] = "5432"
os.environ["DATABASE_USER"] = "transporter"
os.environ["DATABASE_PASS"] = "test-password-not-real"
os.environ["PORT"] = "8080"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from transporter.config import Settings  # noqa: E402
from transporter.database import Base, Database  # noqa: E402
from transporter.main import create_app  # noqa: E402
from transporter.models import driver as _driver_model  # noqa: E402,F401
from transporter.models import truck as _truck_model  # noqa: E402,F401


@pytest.fixture
def settings():
    """Settings from the environment above, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_driver(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
            result = await driver_service.get(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def driver_payload():
    return {
        "name": "Budi Santoso",
        "phone_number": "+6281234567890",
        "id_card_number": "3174091201850001",
        "driver_license_number": "SIM-B2-1185-0042",
    }


@pytest.fixture
def truck_payload():
    return {
        "license_number": "B 9123 KXA",
        "truck_type": "tronton",
        "license_type": "yellow",
        "production_year": 2019,
    }


@pytest_asyncio.fixture
async def database(tmp_path):
    """
    A real Database on a temporary SQLite file, tables created from metadata.

    A file (not :memory:) so every pooled connection sees the same data.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'transporter_test.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.close()


@pytest_asyncio.fixture
async def test_client(database, settings):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/v1/drivers")
    """
    app = create_app(database, settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
