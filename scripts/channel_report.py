"""Print stored video counts per channel."""

from __future__ import annotations

import argparse
import asyncio

from src.sampler.storage import crud
from src.sampler.storage.db import async_session_factory


async def channel_report(limit: int) -> None:
    async with async_session_factory() as session:
        channel_count = await crud.count_publishers(session)
        song_count = await crud.count_media_items(session)
        rows = await crud.channel_item_counts(session, limit=limit)

    print(f"Registered channels: {channel_count}")
    print(f"Stored videos: {song_count}")
    if not rows:
        print("No videos stored yet. Run ingestion first.")
        return

    print("\nVideos per channel:")
    for channel_name, count in rows:
        print(f"- {channel_name}: {count}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise stored videos per channel")
    parser.add_argument("--limit", type=int, default=20, help="Number of channels to list")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(channel_report(args.limit))


if __name__ == "__main__":
    main()
