"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before
anything from src/ is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.sf_common.database import get_db_session  # noqa: E402


async def _mock_db_session() -> AsyncGenerator[MagicMock, None]:
    yield MagicMock()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints without a database.

    The lifespan is not run; routers get a MagicMock session and tests
    override the service dependencies they exercise.
    """
    app.dependency_overrides[get_db_session] = _mock_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
