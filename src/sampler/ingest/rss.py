"""YouTube channel feed fetching and parsing."""

from __future__ import annotations

import contextlib
import logging
import xml.sax
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

import dateparser
import feedparser
import httpx

logger = logging.getLogger("sampler.ingest")

DEFAULT_FEED_HOST = "https://www.youtube.com"


class FeedError(Exception):
    """Base class for per-publisher feed failures."""


class FetchError(FeedError):
    """The feed could not be retrieved."""

    def __init__(self, publisher_id: str, reason: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"{publisher_id}: {reason}")
        self.publisher_id = publisher_id
        self.status_code = status_code


class ParseError(FeedError):
    """The feed document is not well-formed."""


@dataclass(slots=True)
class FeedEntry:
    """Normalized video entry."""

    external_id: str
    title: str
    channel_name: str
    published_at: Optional[datetime] = None

    def to_row(self) -> dict:
        return asdict(self)


def build_feed_url(publisher_id: str, feed_host: str = DEFAULT_FEED_HOST) -> str:
    return f"{feed_host.rstrip('/')}/feeds/videos.xml?channel_id={publisher_id}"


class FeedClient:
    """Fetch channel feeds asynchronously."""

    def __init__(
        self,
        *,
        feed_host: str = DEFAULT_FEED_HOST,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.feed_host = feed_host
        self._client = client

    async def fetch(self, publisher_id: str, *, timeout: float = 10.0) -> str:
        """Return the raw feed document for ``publisher_id``.

        Raises ``FetchError`` on transport errors and non-2xx responses.
        """

        url = build_feed_url(publisher_id, self.feed_host)
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
            close_client = True

        logger.info("Fetching feed for channel: %s", publisher_id)
        try:
            response = await client.get(url, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(publisher_id, f"{type(exc).__name__}: {exc}") from exc
        finally:
            if close_client:
                await client.aclose()

        if not response.is_success:
            raise FetchError(
                publisher_id,
                f"status {response.status_code}",
                status_code=response.status_code,
            )
        return response.text


def parse_feed(raw_text: str) -> list[FeedEntry]:
    """Parse a channel feed into entries.

    Entries lacking a video id, title or author name are skipped. A document
    that is not well-formed XML raises ``ParseError``.
    """

    parsed = feedparser.parse(raw_text)
    if parsed.bozo and isinstance(parsed.get("bozo_exception"), xml.sax.SAXException):
        raise ParseError(str(parsed.bozo_exception))

    if not parsed.entries:
        logger.info("No entries found in feed document")
        return []

    entries: list[FeedEntry] = []
    for entry in parsed.entries:
        video_id = entry.get("yt_videoid")
        title = entry.get("title")
        author = entry.get("author_detail", {}).get("name") or entry.get("author")
        if not video_id or title is None or not author:
            logger.debug("Skipping incomplete entry: %s", entry.get("id"))
            continue
        entries.append(
            FeedEntry(
                external_id=video_id,
                title=title,
                channel_name=author,
                published_at=_parse_datetime(entry),
            )
        )
    return entries


def _parse_datetime(entry: feedparser.util.FeedParserDict) -> Optional[datetime]:
    """Parse the published timestamp using dateparser."""

    for key in ("published", "updated"):
        raw = entry.get(key)
        if raw:
            with contextlib.suppress(ValueError, OverflowError):
                return dateparser.parse(raw)
    return None
