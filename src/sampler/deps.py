"""FastAPI dependencies."""

from collections.abc import AsyncIterator

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .ingest.rss import FeedClient
from .storage.db import async_session_factory


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Yield an async SQLAlchemy session."""

    async with async_session_factory() as session:
        yield session


async def get_feed_client() -> AsyncIterator[FeedClient]:
    """Yield a feed client backed by a request-scoped HTTP client."""

    settings = get_settings()
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.feed_timeout_seconds)) as client:
        yield FeedClient(feed_host=settings.feed_host, client=client)
