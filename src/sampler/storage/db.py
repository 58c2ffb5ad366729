"""Engine, session factory and schema commands for the sampler store."""

from __future__ import annotations

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from ..config import get_settings
from .models import Base


settings = get_settings()


def create_engine() -> AsyncEngine:
    """Build the engine for ``settings.database_url``."""

    return create_async_engine(settings.database_url, echo=False, future=True, pool_pre_ping=True)


engine: AsyncEngine = create_engine()
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def init_db() -> None:
    """Create the publishers and media_items tables if missing."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db() -> None:
    """Drop every stored channel and video."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def seed_db() -> int:
    """Create tables and load the built-in channel list."""

    from ..ingest.registry import reset_and_seed

    await init_db()
    async with async_session_factory() as session:
        return await reset_and_seed(session)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the sampler channel/video store")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--init", action="store_true", help="Create the channel and video tables")
    group.add_argument("--drop", action="store_true", help="Drop all stored channels and videos")
    group.add_argument("--seed", action="store_true", help="Create tables and reseed the channel registry")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    if args.init:
        asyncio.run(init_db())
    elif args.drop:
        asyncio.run(drop_db())
    else:
        count = asyncio.run(seed_db())
        print(f"Seeded {count} channels")


if __name__ == "__main__":
    main()
