"""
Projectdesk Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Tests run against a real SQLite database (aiosqlite) in a temporary
       directory. Tables are rebuilt for every test.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db:          empty schema with the reference statuses seeded
    │                (New=1, In Progress=2, Completed=3); no roles/services
    ├── uow:         a UnitOfWork on the test database
    ├── count_rows:  counts rows of a model, optionally filtered
    └── test_client: HTTPX AsyncClient talking to the FastAPI app
"""

import os
import tempfile

# Override settings for testing BEFORE any projectdesk imports:
# the engine is created from DATABASE_URL at import time.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="projectdesk_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_REFERENCE_DATA"] = "false"
os.environ["DB_READ_RETRY_MIN_WAIT"] = "0"
os.environ["DB_READ_RETRY_MAX_WAIT"] = "0"

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select

from projectdesk import database
from projectdesk.unit_of_work import UnitOfWork


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db():
    """
    Provides a freshly created schema for one test.

    Only the statuses are seeded, so roles, services, staff and customers
    start empty. The engine is disposed afterwards: pooled aiosqlite
    connections must not outlive the test's event loop.
    """
    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.drop_all)
    await database.init_models()
    await database.seed_reference_data(include_catalog=False)

    yield

    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.drop_all)
    await database.engine.dispose()


@pytest_asyncio.fixture
async def uow(db):
    async with UnitOfWork(database.async_session_factory) as unit:
        yield unit


@pytest_asyncio.fixture
async def count_rows(db):
    """
    Usage:
        assert await count_rows(Role) == 1
        assert await count_rows(Staff, name="Alice") == 2
    """
    async def _count(model, **filters) -> int:
        stmt = select(func.count()).select_from(model).filter_by(**filters)
        async with database.async_session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    return _count


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the schema comes from the
    db fixture and the engine is not disposed mid-test.
    """
    from projectdesk.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
