"""Test configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from samachar.config import Settings
from samachar.core.store import ArticleStore
from samachar.main import app
from samachar.models.candidate import ArticleCandidate


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        feed_retry_base_delay=0.0,
        gnews_api_key="",
        newsapi_key="",
    )


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over an in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> ArticleStore:
    """Article store over the in-memory database."""
    return ArticleStore(session_factory)


@pytest.fixture
def make_candidate() -> Callable[..., ArticleCandidate]:
    """Factory for feed candidates."""

    def _make(**overrides: Any) -> ArticleCandidate:
        data: dict[str, Any] = {
            "title": "Test headline",
            "description": "Test description",
            "url": "https://example.com/news/1",
            "image": None,
            "published_at": datetime(2024, 1, 1, 10, 0, tzinfo=UTC),
            "source": "Example News",
            "source_key": "TEST_SOURCE",
            "source_name": "Test Source",
            "priority": 1,
        }
        data.update(overrides)
        return ArticleCandidate(**data)

    return _make
