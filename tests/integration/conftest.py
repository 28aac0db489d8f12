"""Integration-test fixtures.

Requires a running PostgreSQL with migrations applied (alembic upgrade head)
and RUN_INTEGRATION_TESTS=1. All integration tests share one event loop so the
Database handle opened here stays valid for the whole session.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.sf_common.database import Database, create_database


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def database() -> AsyncGenerator[Database, None]:
    database = create_database()
    await database.open()
    app.state.database = database
    yield database
    await database.close()


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Session-scoped async HTTP client against the real database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
