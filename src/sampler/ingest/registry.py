"""Built-in publisher registry and startup seeding."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..storage import crud

logger = logging.getLogger("sampler.ingest")

# Channel 2 and Channel 8 share an id; the list is kept as shipped.
DEFAULT_PUBLISHERS: list[dict[str, str]] = [
    {"publisher_id": "UCXxNR5OIs52ZQUDc9RlAing", "name": "Channel 1"},
    {"publisher_id": "UCY8_y20lxQhhBe8GZl5A9rw", "name": "Channel 2"},
    {"publisher_id": "UCKydEBEvAU5zkN8o1snt62A", "name": "Channel 3"},
    {"publisher_id": "UC2CMBX0xUGWdK9SmewrU8B", "name": "Channel 4"},
    {"publisher_id": "UCg4HwkoSEhqyvk_qwiB5M7g", "name": "Channel 5"},
    {"publisher_id": "UCbFRFUEgRI64ZogqawRh5Wg", "name": "Channel 6"},
    {"publisher_id": "UCLcnbgnInVXNeR4mnB6-ScQ", "name": "Channel 7"},
    {"publisher_id": "UCY8_y20lxQhhBe8GZl5A9rw", "name": "Channel 8"},
    {"publisher_id": "UC-RVESJTf_zSaFB8qGoxOnA", "name": "Channel 9"},
    {"publisher_id": "UCZPDvPgP_E1Z-qyMppvJsRQ", "name": "Channel 10"},
    {"publisher_id": "UCKgYw7coD5LZXGiS-sXnzJQ", "name": "Channel 11"},
    {"publisher_id": "UC-T9Vf1N9MwW8HttzC_KIaQ", "name": "Channel 12"},
    {"publisher_id": "UCVBZ9XZcgv0h3dscFWaHNgA", "name": "Channel 13"},
    {"publisher_id": "UCD3m_nnW8Tma4FIhg56IuIA", "name": "Channel 14"},
    {"publisher_id": "UCtrJ2-RStj9rX6SOGzv7ybA", "name": "Channel 15"},
]


async def reset_and_seed(
    session: AsyncSession,
    publishers: list[dict[str, str]] | None = None,
) -> int:
    """Replace the stored registry with ``publishers`` and commit."""

    publishers = DEFAULT_PUBLISHERS if publishers is None else publishers
    logger.info("Clearing existing channels and seeding %d defaults", len(publishers))
    created = await crud.replace_publishers(session, publishers)
    await session.commit()
    return len(created)


async def initialize_registry(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """Seed the registry at startup.

    Storage errors are logged and swallowed so the process keeps serving with
    whatever registry is left behind.
    """

    async with session_factory() as session:
        try:
            count = await reset_and_seed(session)
        except SQLAlchemyError as exc:
            logger.error("Seeding channels failed: %s", exc, exc_info=True)
            await session.rollback()
            return False
    logger.info("Seeded %d channels", count)
    return True
