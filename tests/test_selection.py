"""Tests for random media item selection."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from src.sampler.selection import pick_random
from src.sampler.storage import crud


class FixedRandom(random.Random):
    def __init__(self, value: int) -> None:
        super().__init__()
        self.value = value

    def randrange(self, *args, **kwargs) -> int:
        return self.value


async def store(session, count: int) -> None:
    await crud.insert_media_items(
        session,
        [
            {"external_id": f"v{idx}", "title": f"Video {idx}", "channel_name": "Alpha"}
            for idx in range(count)
        ],
    )


@pytest.mark.asyncio
async def test_pick_random_empty_returns_none(db_session):
    assert await pick_random(db_session) is None


@pytest.mark.asyncio
async def test_pick_random_uses_insertion_offset(db_session):
    await store(db_session, 4)
    item = await pick_random(db_session, rng=FixedRandom(2))
    assert item is not None
    assert item.external_id == "v2"


@pytest.mark.asyncio
async def test_pick_random_is_roughly_uniform(db_session):
    await store(db_session, 3)
    rng = random.Random(1234)
    counts = Counter()
    draws = 1200
    for _ in range(draws):
        item = await pick_random(db_session, rng=rng)
        counts[item.external_id] += 1

    assert set(counts) == {"v0", "v1", "v2"}
    for value in counts.values():
        assert 300 < value < 500
