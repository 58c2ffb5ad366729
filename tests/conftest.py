"""Pytest fixtures for Sampler tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import AsyncIterator, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.sampler.config import Settings
from src.sampler.deps import get_db_session, get_feed_client
from src.sampler.ingest.rss import FeedClient
from src.sampler.main import app
from src.sampler.storage.models import Base

FEED_HOST = "https://feeds.test"


def _entry_xml(video_id: Optional[str], title: str, author: str) -> str:
    video_tag = f"<yt:videoId>{video_id}</yt:videoId>" if video_id else ""
    return (
        "<entry>"
        f"<id>yt:video:{video_id or 'missing'}</id>"
        f"{video_tag}"
        f"<title>{title}</title>"
        f"<author><name>{author}</name><uri>https://www.youtube.com/channel/x</uri></author>"
        "<published>2024-05-01T12:00:00+00:00</published>"
        "</entry>"
    )


def build_feed(entries: list[tuple[Optional[str], str, str]]) -> str:
    body = "".join(_entry_xml(*entry) for entry in entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" '
        'xmlns:media="http://search.yahoo.com/mrss/" '
        'xmlns="http://www.w3.org/2005/Atom">'
        "<title>Test channel</title>"
        f"{body}"
        "</feed>"
    )


class FeedServer:
    """Serve canned channel feeds through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, str]] = {}
        self.requests: list[str] = []

    def add(self, publisher_id: str, body: str, status_code: int = 200) -> None:
        self.routes[publisher_id] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        publisher_id = request.url.params.get("channel_id", "")
        self.requests.append(publisher_id)
        status_code, body = self.routes.get(publisher_id, (404, "Not Found"))
        return httpx.Response(status_code, text=body)


@pytest.fixture
def feed_xml() -> Callable[[list[tuple[Optional[str], str, str]]], str]:
    """Return a builder for channel feed documents."""
    return build_feed


@pytest.fixture
def feed_server() -> FeedServer:
    return FeedServer()


@pytest_asyncio.fixture
async def feed_client(feed_server) -> AsyncIterator[FeedClient]:
    """Provide a feed client whose requests are answered by ``feed_server``."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(feed_server.handler)) as client:
        yield FeedClient(feed_host=FEED_HOST, client=client)


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db_sessionmaker(test_db_engine):
    """Provide a session factory bound to the test engine."""
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db_sessionmaker) -> AsyncIterator[AsyncSession]:
    async with test_db_sessionmaker() as session:
        yield session


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Provide test-specific settings."""
    return Settings(
        app_env="test",
        log_level="DEBUG",
        database_url="sqlite+aiosqlite:///:memory:",
        scheduler_enabled=False,
        feed_host=FEED_HOST,
    )


@pytest_asyncio.fixture(scope="function")
async def test_client(test_db_sessionmaker, feed_client) -> AsyncIterator[AsyncClient]:
    """Provide an async HTTP client for testing the FastAPI app."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with test_db_sessionmaker() as session:
            yield session

    async def override_feed_client() -> FeedClient:
        return feed_client

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_feed_client] = override_feed_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_feed_client, None)
