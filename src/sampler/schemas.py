"""Pydantic schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MediaItem(BaseModel):
    id: int
    external_id: str = Field(serialization_alias="externalId")
    title: str
    channel_name: str = Field(serialization_alias="channelName")
    published_at: Optional[datetime] = Field(default=None, serialization_alias="publishedAt")
    discovered_at: datetime = Field(serialization_alias="discoveredAt")

    class Config:
        from_attributes = True


class FetchResponse(BaseModel):
    success: bool = True
    added: int


class DatabaseStatus(BaseModel):
    success: bool = True
    channel_count: int = Field(serialization_alias="channelCount")
    song_count: int = Field(serialization_alias="songCount")


class ErrorResponse(BaseModel):
    error: str
