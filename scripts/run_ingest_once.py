"""Utility script to run a single ingestion cycle across all channels."""

from __future__ import annotations

import argparse
import asyncio

import httpx

from src.sampler.config import get_settings
from src.sampler.ingest.pipeline import ingest_all
from src.sampler.ingest.registry import reset_and_seed
from src.sampler.ingest.rss import FeedClient
from src.sampler.storage.db import async_session_factory, init_db


async def ingest_once(seed: bool, concurrency: int) -> None:
    settings = get_settings()
    await init_db()
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.feed_timeout_seconds)) as client:
        feed_client = FeedClient(feed_host=settings.feed_host, client=client)
        async with async_session_factory() as session:
            if seed:
                seeded = await reset_and_seed(session)
                print(f"Seeded {seeded} channels")
            report = await ingest_all(session, feed_client, concurrency=concurrency)

    print(f"Collected {report.added} videos from {report.fetched}/{report.publishers} channels")
    print(f"Persisted {report.insert.succeeded}, rejected {len(report.insert.failed_rows)}")
    if report.failed_publishers:
        print("Failed channels:", ", ".join(report.failed_publishers))


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a single feed ingestion cycle")
    parser.add_argument("--seed", action="store_true", help="Reset and seed the channel registry first")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=get_settings().ingest_concurrency,
        help="Maximum number of simultaneous feed fetches",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(ingest_once(args.seed, args.concurrency))


if __name__ == "__main__":
    main()
