"""Synchronization pass: fetch the feed, diff it, download what is missing."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

from .config import SyncConfig
from .diff import DiffEngine
from .download import EpisodeDownloader
from .http_session import create_session
from .logging_config import create_execution_logger
from .rss import FeedProcessor


@dataclass
class SyncResult:
    """Counts describing a completed synchronization pass."""

    channel_title: str
    total: int
    missing: int
    downloaded: int


class PodcastSynchronizer:
    """Runs one fetch, diff and download pass for a feed URL."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        feed_processor: FeedProcessor | None = None,
        diff_engine: DiffEngine | None = None,
        downloader: EpisodeDownloader | None = None,
        execution_id: str | None = None,
    ):
        self.config = config or SyncConfig()
        self.execution_id = (
            execution_id or f"sync_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
        )
        session = None
        if feed_processor is None or downloader is None:
            session = create_session(self.config)
        self.feed_processor = feed_processor or FeedProcessor(
            self.config, session=session, execution_id=self.execution_id
        )
        self.diff_engine = diff_engine or DiffEngine(
            self.config, execution_id=self.execution_id
        )
        self.downloader = downloader or EpisodeDownloader(
            self.config, session=session, execution_id=self.execution_id
        )
        self.logger = create_execution_logger("main", self.execution_id)

    async def synchronize(self, feed_url: str) -> SyncResult:
        """Download every feed episode that is not already on disk.

        Downloads run one at a time in ascending publish-date order. The
        first failure aborts the pass; files written before it are kept.
        """
        self.logger.log_execution_start(feed_url=feed_url)

        feed = await asyncio.to_thread(self.feed_processor.load_feed, feed_url)
        self.logger.info(
            f"Fetched {len(feed.episodes)} items from {feed.channel_title}",
            feed_url=feed_url,
            channel_title=feed.channel_title,
        )

        missing = await self.diff_engine.filter_missing(feed)
        self.logger.info(f"Found {len(missing)} missing items.")

        downloaded = 0
        for index, episode in enumerate(missing, start=1):
            self.logger.info(
                f"Processing {episode.title}. {index} of {len(missing)}",
                item_title=episode.title,
            )
            await self.downloader.download_episode(feed, episode)
            downloaded += 1

        result = SyncResult(
            channel_title=feed.channel_title,
            total=len(feed.episodes),
            missing=len(missing),
            downloaded=downloaded,
        )
        self.logger.log_metrics(
            {"total": result.total, "missing": result.missing, "downloaded": downloaded}
        )
        self.logger.log_execution_end(success=True)
        return result


async def synchronize(feed_url: str, config: SyncConfig | None = None) -> SyncResult:
    """Run a single synchronization pass for ``feed_url``."""
    return await PodcastSynchronizer(config).synchronize(feed_url)
