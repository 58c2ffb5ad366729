"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from typing import Optional, Union

import httpx
import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .deps import get_db_session, get_feed_client
from .ingest.pipeline import ingest_all
from .ingest.registry import initialize_registry
from .ingest.rss import FeedClient
from .schemas import DatabaseStatus, ErrorResponse, FetchResponse, MediaItem as MediaItemSchema
from .selection import pick_random
from .storage import crud
from .storage.db import async_session_factory, init_db


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("sampler")

WELCOME_MESSAGE = "Welcome to the Sampler App! Try /random-song, /fetch-from-rss, or /test-db."

app = FastAPI(title="Sampler Feed API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

scheduler: Optional[AsyncIOScheduler] = None


def error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.on_event("startup")
async def on_startup() -> None:
    global scheduler
    logger.info("Application startup initiated")
    # Registry must be seeded before requests are served.
    try:
        await init_db()
    except SQLAlchemyError as exc:
        logger.error("Creating tables failed: %s", exc, exc_info=True)
    await initialize_registry(async_session_factory)
    if settings.scheduler_enabled:
        logger.info("Starting scheduler, interval: %d minutes", settings.ingest_interval_minutes)
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            scheduled_ingest,
            "interval",
            minutes=settings.ingest_interval_minutes,
            id="ingest-all",
            replace_existing=True,
        )
        scheduler.start()
    else:
        logger.info("Scheduler disabled")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    logger.info("Application shutdown initiated")
    if scheduler and scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")


@app.get("/", response_class=PlainTextResponse, tags=["system"])
async def root() -> str:
    return WELCOME_MESSAGE


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    """Simple health probe endpoint."""

    return {"status": "ok", "env": settings.app_env}


@app.get(
    "/fetch-from-rss",
    response_model=FetchResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["ingest"],
)
async def fetch_from_rss(
    session: AsyncSession = Depends(get_db_session),
    feed_client: FeedClient = Depends(get_feed_client),
) -> Union[FetchResponse, JSONResponse]:
    """Run one ingestion cycle across every registered channel."""

    try:
        report = await ingest_all(session, feed_client, concurrency=settings.ingest_concurrency)
    except Exception as exc:
        logger.error("Error fetching RSS feeds: %s", exc, exc_info=True)
        return error_response("Failed to fetch videos from RSS feeds")
    return FetchResponse(added=report.added)


@app.get(
    "/random-song",
    response_model=Optional[MediaItemSchema],
    responses={500: {"model": ErrorResponse}},
    tags=["songs"],
)
async def random_song(
    session: AsyncSession = Depends(get_db_session),
) -> Union[MediaItemSchema, JSONResponse, None]:
    try:
        item = await pick_random(session)
    except Exception as exc:
        logger.error("Error in /random-song: %s", exc, exc_info=True)
        return error_response("Failed to fetch a random song")
    if item is None:
        logger.info("No songs found in the database")
        return None
    logger.info("Fetched song: %s from channel: %s", item.title, item.channel_name)
    return MediaItemSchema.model_validate(item)


@app.get(
    "/test-db",
    response_model=DatabaseStatus,
    responses={500: {"model": ErrorResponse}},
    tags=["system"],
)
async def test_db(
    session: AsyncSession = Depends(get_db_session),
) -> Union[DatabaseStatus, JSONResponse]:
    """Report stored channel and song counts."""

    try:
        channel_count = await crud.count_publishers(session)
        song_count = await crud.count_media_items(session)
    except Exception as exc:
        logger.error("Error in /test-db: %s", exc, exc_info=True)
        return error_response("Database connection failed")
    return DatabaseStatus(channel_count=channel_count, song_count=song_count)


async def scheduled_ingest() -> None:
    """Scheduled job running a full ingestion cycle."""

    logger.info("Scheduled ingestion started")
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.feed_timeout_seconds)) as client:
        feed_client = FeedClient(feed_host=settings.feed_host, client=client)
        async with async_session_factory() as session:
            try:
                report = await ingest_all(session, feed_client, concurrency=settings.ingest_concurrency)
            except Exception as exc:
                logger.error("Scheduled ingestion failed: %s", exc, exc_info=True)
                return
    logger.info(
        "Scheduled ingestion complete: %d videos from %d/%d channels",
        report.added,
        report.fetched,
        report.publishers,
    )


def run() -> None:
    """Serve the API with uvicorn."""

    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
