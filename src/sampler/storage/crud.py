"""CRUD helpers for database operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import MediaItem, Publisher

logger = logging.getLogger("sampler.storage")


@dataclass(slots=True)
class InsertResult:
    """Outcome of a best-effort bulk insert."""

    attempted: int
    succeeded: int
    failed_rows: list[dict] = field(default_factory=list)


async def replace_publishers(session: AsyncSession, publishers: Iterable[dict]) -> list[Publisher]:
    """Delete every publisher and insert ``publishers`` in their place."""

    await session.execute(delete(Publisher))
    created = [Publisher(**data) for data in publishers]
    session.add_all(created)
    await session.flush()
    return created


async def list_publishers(session: AsyncSession) -> list[Publisher]:
    result = await session.execute(select(Publisher).order_by(Publisher.id))
    return list(result.scalars())


async def count_publishers(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Publisher))
    return result.scalar_one()


async def count_media_items(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(MediaItem))
    return result.scalar_one()


async def get_media_item_at(session: AsyncSession, offset: int) -> Optional[MediaItem]:
    """Return the item at ``offset`` in insertion order."""

    stmt = select(MediaItem).order_by(MediaItem.id).offset(offset).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def insert_media_items(session: AsyncSession, rows: Sequence[dict]) -> InsertResult:
    """Insert ``rows`` and commit, tolerating individual row failures.

    The batch is first written in a single transaction. When that trips an
    integrity error the transaction is rolled back and each row is committed
    on its own, so one bad row never keeps the others out. Any other
    database error propagates.
    """

    if not rows:
        return InsertResult(attempted=0, succeeded=0)

    try:
        session.add_all([MediaItem(**data) for data in rows])
        await session.commit()
        return InsertResult(attempted=len(rows), succeeded=len(rows))
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Bulk insert rejected (%s), retrying %d rows individually", exc.orig, len(rows))

    succeeded = 0
    failed: list[dict] = []
    for data in rows:
        session.add(MediaItem(**data))
        try:
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            logger.debug("Skipping row %s: %s", data.get("external_id"), exc.orig)
            failed.append(data)
            continue
        succeeded += 1
    return InsertResult(attempted=len(rows), succeeded=succeeded, failed_rows=failed)


async def channel_item_counts(session: AsyncSession, limit: int = 50) -> list[tuple[str, int]]:
    """Return stored item counts per channel name, largest first."""

    stmt = (
        select(MediaItem.channel_name, func.count().label("count"))
        .group_by(MediaItem.channel_name)
        .order_by(func.count().desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return [(row.channel_name, row.count) for row in result.all()]
