"""Data models for podsync."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_CHANNEL_TITLE = "Untitled Podcast"


@dataclass
class RawItem:
    """Fields read from a single feed entry, before validation."""

    title: str = ""
    published: str = ""
    url: str = ""
    length: str = ""


@dataclass(frozen=True)
class Episode:
    """A validated, downloadable podcast episode."""

    title: str
    published: datetime  # Always timezone-aware (UTC)
    url: str
    size: int = 0  # Declared enclosure length, 0 when unreported


@dataclass(frozen=True)
class Feed:
    """A parsed podcast feed: channel title plus episodes sorted by date."""

    channel_title: str = DEFAULT_CHANNEL_TITLE
    episodes: tuple[Episode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "episodes", tuple(self.episodes))
