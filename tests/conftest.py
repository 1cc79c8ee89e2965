"""Shared fixtures and builders for podsync tests."""

from datetime import UTC, datetime
from xml.sax.saxutils import escape, quoteattr

import pytest

from podsync.config import SyncConfig
from podsync.models import Episode


def make_episode(
    title: str = "Episode 1",
    published: datetime | None = None,
    url: str = "https://cdn.example.com/ep1.mp3",
    size: int = 1000,
) -> Episode:
    return Episode(
        title=title,
        published=published or datetime(2024, 1, 1, 10, 0, tzinfo=UTC),
        url=url,
        size=size,
    )


def rss_item(
    title: str | None = "Episode",
    pub_date: str | None = "Mon, 01 Jan 2024 10:00:00 GMT",
    url: str | None = "https://cdn.example.com/episode.mp3",
    length: str | None = "1000",
) -> str:
    """Render one RSS ``<item>``; pass None to leave a field out."""
    parts = ["<item>"]
    if title is not None:
        parts.append(f"<title>{escape(title)}</title>")
    if pub_date is not None:
        parts.append(f"<pubDate>{escape(pub_date)}</pubDate>")
    if url is not None:
        attrs = f"url={quoteattr(url)} type=\"audio/mpeg\""
        if length is not None:
            attrs += f" length={quoteattr(length)}"
        parts.append(f"<enclosure {attrs}/>")
    parts.append("</item>")
    return "".join(parts)


def rss_document(items: list[str], channel_title: str | None = "Test Podcast") -> bytes:
    channel_parts = ["<channel>"]
    if channel_title is not None:
        channel_parts.append(f"<title>{escape(channel_title)}</title>")
    channel_parts.append("<link>https://example.com</link>")
    channel_parts.extend(items)
    channel_parts.append("</channel>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0">' + "".join(channel_parts) + "</rss>"
    ).encode("utf-8")


@pytest.fixture
def sync_config(tmp_path) -> SyncConfig:
    return SyncConfig(root=tmp_path / "podcasts")
