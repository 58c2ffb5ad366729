"""Fan-out ingestion across every registered channel."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from ..storage import crud
from ..storage.crud import InsertResult
from .rss import FeedClient, FeedEntry, FeedError, parse_feed

logger = logging.getLogger("sampler.ingest")


@dataclass(slots=True)
class IngestReport:
    """Summary of one ingestion cycle.

    ``added`` counts the entries collected from feeds, not the rows that were
    actually persisted; see ``insert`` for the latter.
    """

    publishers: int
    fetched: int
    added: int
    insert: InsertResult
    failed_publishers: list[str] = field(default_factory=list)


async def ingest_all(
    session: AsyncSession,
    feed_client: FeedClient,
    *,
    concurrency: int = 15,
) -> IngestReport:
    """Fetch, parse and store entries for every registered channel.

    Per-channel fetch or parse failures contribute nothing and are logged.
    Errors reading the registry or writing the batch propagate.
    """

    publishers = await crud.list_publishers(session)
    publisher_ids = [publisher.publisher_id for publisher in publishers]
    logger.info("Ingestion cycle started for %d channel(s)", len(publisher_ids))

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def run_branch(publisher_id: str) -> list[FeedEntry] | None:
        async with semaphore:
            try:
                raw = await feed_client.fetch(publisher_id)
                entries = parse_feed(raw)
            except FeedError as exc:
                logger.error("Failed to ingest feed for channel %s: %s", publisher_id, exc)
                return None
        if not entries:
            logger.info("No videos found for channel: %s", publisher_id)
        return entries

    results = await asyncio.gather(*(run_branch(pid) for pid in publisher_ids))

    batch: list[dict] = []
    failed: list[str] = []
    for publisher_id, entries in zip(publisher_ids, results):
        if entries is None:
            failed.append(publisher_id)
            continue
        batch.extend(entry.to_row() for entry in entries)

    logger.info("Total videos fetched: %d", len(batch))
    insert = await crud.insert_media_items(session, batch)
    if insert.failed_rows:
        logger.warning(
            "Inserted %d of %d videos, %d rejected",
            insert.succeeded,
            insert.attempted,
            len(insert.failed_rows),
        )
    else:
        logger.info("Inserted %d videos", insert.succeeded)

    return IngestReport(
        publishers=len(publisher_ids),
        fetched=len(publisher_ids) - len(failed),
        added=insert.attempted,
        insert=insert,
        failed_publishers=failed,
    )
