"""
Postboard Backend: Test Configuration (conftest.py)
=====================================================

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── sample_post: attribute object shaped like a Post row
    ├── test_settings / strict_settings: Settings bound to a temp sqlite file
    ├── test_app / strict_app: applications with tables created
    └── test_client / strict_client: HTTPX AsyncClient over ASGITransport
"""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Environment must be set before postboard is imported: postboard.main builds
# its module-level app from the default settings.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["API_KEY"] = "test-api-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from postboard.config import Settings
from postboard.database import create_tables
from postboard.main import create_app

TEST_API_KEY = "test-api-key"
AUTH_HEADERS = {"X-API-Key": TEST_API_KEY}


# ══════════════════════════════════════════════════════════════════════════
# Service-level fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession.

    Usage:
        mock_db_session.get.return_value = sample_post
        result = await post_service.get_post(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_post():
    created = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    return SimpleNamespace(
        id=1,
        title="First post",
        content="Hello from the first post.",
        created_at=created,
        updated_at=created,
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP fixtures (real app, temporary sqlite database)
# ══════════════════════════════════════════════════════════════════════════

def _settings_for(path, **overrides) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{path}",
        api_key=TEST_API_KEY,
        log_level="WARNING",
        **overrides,
    )


@pytest.fixture
def test_settings(tmp_path):
    return _settings_for(tmp_path / "postboard_test.db")


@pytest.fixture
def strict_settings(tmp_path):
    return _settings_for(tmp_path / "postboard_strict.db", strict_status_codes=True)


@pytest_asyncio.fixture
async def test_app(test_settings):
    app = create_app(test_settings)
    await create_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def strict_app(strict_settings):
    app = create_app(strict_settings)
    await create_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/posts")
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def strict_client(strict_app):
    transport = ASGITransport(app=strict_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
