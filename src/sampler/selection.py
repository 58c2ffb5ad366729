"""Uniform random pick over stored media items."""

from __future__ import annotations

import random
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .storage import crud
from .storage.models import MediaItem


async def pick_random(session: AsyncSession, rng: Optional[random.Random] = None) -> Optional[MediaItem]:
    """Return a uniformly chosen stored item, or ``None`` when storage is empty."""

    count = await crud.count_media_items(session)
    if count == 0:
        return None
    index = (rng or random).randrange(count)
    return await crud.get_media_item_at(session, index)
