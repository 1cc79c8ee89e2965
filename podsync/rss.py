"""RSS feed processing module for podsync."""

import re
from datetime import UTC, datetime

import feedparser
import requests
from dateutil import parser as date_parser
from dateutil.tz import tzoffset

from .config import SyncConfig
from .errors import FeedFetchError
from .http_session import create_session
from .logging_config import create_execution_logger
from .models import DEFAULT_CHANNEL_TITLE, Episode, Feed, RawItem

_LEADING_INTEGER = re.compile(r"\s*(\d+)")

# Zone names allowed by RFC 822, which dateutil does not resolve on its own
RFC822_TZINFOS = {
    name: tzoffset(name, hours * 3600)
    for name, hours in (
        ("UT", 0),
        ("GMT", 0),
        ("Z", 0),
        ("EST", -5),
        ("EDT", -4),
        ("CST", -6),
        ("CDT", -5),
        ("MST", -7),
        ("MDT", -6),
        ("PST", -8),
        ("PDT", -7),
    )
}


def parse_published(value: str | None) -> datetime | None:
    """Parse a feed date string into a timezone-aware UTC datetime.

    Naive timestamps are read as UTC. Returns None when the value is empty,
    unparseable, or falls on the Unix epoch itself.
    """
    if not value or not value.strip():
        return None

    try:
        published = date_parser.parse(value, tzinfos=RFC822_TZINFOS)
    except (ValueError, OverflowError, TypeError):
        return None

    if published.tzinfo is None:
        published = published.replace(tzinfo=UTC)
    published = published.astimezone(UTC)

    if published.timestamp() == 0:
        return None
    return published


def parse_length(value: str | None) -> int:
    """Read the leading integer of an enclosure length, 0 if there is none."""
    if not value:
        return 0
    match = _LEADING_INTEGER.match(str(value))
    return int(match.group(1)) if match else 0


class FeedProcessor:
    """Fetches podcast RSS feeds and normalizes them into Feed objects."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize FeedProcessor with configuration.

        Args:
            config: Synchronization settings (timeout, User-Agent, retries)
            session: Optional pre-built HTTP session
            execution_id: Execution ID for logging context
        """
        self.config = config or SyncConfig()
        self.session = session or create_session(self.config)
        self.logger = create_execution_logger("feed_processor", execution_id)

    def fetch_feed(self, feed_url: str) -> bytes:
        """Download the raw feed document.

        Raises:
            FeedFetchError: If the request fails or returns an error status
        """
        self.logger.debug("Downloading feed content", feed_url=feed_url)
        try:
            response = self.session.get(feed_url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise FeedFetchError(f"Failed to download feed {feed_url}: {e}") from e

        self.logger.debug(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.content

    def load_feed(self, feed_url: str) -> Feed:
        """Fetch and parse a feed in one step."""
        return self.parse_feed(self.fetch_feed(feed_url))

    def parse_feed(self, raw_markup: bytes | str) -> Feed:
        """Parse raw feed markup into a Feed.

        Entries without a title, a usable publish date or an enclosure URL
        are dropped. Surviving episodes are sorted by publish date; entries
        sharing a date keep their feed order.
        """
        parsed = feedparser.parse(raw_markup)

        if parsed.bozo and hasattr(parsed, "bozo_exception"):
            self.logger.warning(
                f"Feed parsing warning: {parsed.bozo_exception}",
                bozo_exception=str(parsed.bozo_exception),
            )

        raw_items = self.extract_raw_items(parsed)
        episodes = []
        for raw_item in raw_items:
            episode = self.normalize_item(raw_item)
            if episode is not None:
                episodes.append(episode)

        episodes.sort(key=lambda episode: episode.published)

        channel_title = (parsed.feed.get("title") or "").strip()
        feed = Feed(
            channel_title=channel_title or DEFAULT_CHANNEL_TITLE,
            episodes=tuple(episodes),
        )

        self.logger.debug(
            "Successfully parsed feed",
            channel_title=feed.channel_title,
            items_count=len(episodes),
            total_entries=len(raw_items),
        )
        return feed

    def extract_raw_items(self, parsed: feedparser.FeedParserDict) -> list[RawItem]:
        """Read the fields of interest from every entry of a parsed feed."""
        raw_items = []
        for entry in parsed.entries:
            enclosure = next(
                (e for e in entry.get("enclosures", []) if e.get("href")), {}
            )
            raw_items.append(
                RawItem(
                    title=entry.get("title") or "",
                    published=entry.get("published") or "",
                    url=enclosure.get("href") or "",
                    length=str(enclosure.get("length") or ""),
                )
            )
        return raw_items

    def normalize_item(self, raw_item: RawItem) -> Episode | None:
        """Validate a raw entry and build an Episode, or return None."""
        title = raw_item.title.strip()
        url = raw_item.url.strip()
        published = parse_published(raw_item.published)

        missing = [
            name
            for name, value in (("title", title), ("date", published), ("url", url))
            if not value
        ]
        if missing:
            self.logger.debug(
                f"Dropping feed entry missing {', '.join(missing)}",
                item_title=title,
            )
            return None

        return Episode(
            title=title,
            published=published,
            url=url,
            size=parse_length(raw_item.length),
        )
