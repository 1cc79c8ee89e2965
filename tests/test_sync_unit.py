"""Unit tests for the synchronization pass."""

import logging
from unittest.mock import AsyncMock, Mock, patch

import pytest

from conftest import rss_document, rss_item
from podsync.errors import EpisodeDownloadError, FeedFetchError
from podsync.paths import build_file_path
from podsync.rss import FeedProcessor
from podsync.sync import PodcastSynchronizer, SyncResult, synchronize

FEED_URL = "https://example.com/feed.xml"


def _feed_processor(raw: bytes, config) -> FeedProcessor:
    session = Mock()
    session.get.return_value.content = raw
    return FeedProcessor(config, session=session)


def _scenario_feed() -> bytes:
    return rss_document(
        [
            rss_item(
                title="New Year",
                pub_date="Mon, 01 Jan 2024 08:00:00 GMT",
                url="https://cdn.example.com/1.mp3",
                length="100",
            ),
            rss_item(
                title="Third Day",
                pub_date="Wed, 03 Jan 2024 08:00:00 GMT",
                url="https://cdn.example.com/3.mp3",
                length="300",
            ),
            rss_item(
                title="Second Day",
                pub_date="Tue, 02 Jan 2024 08:00:00 GMT",
                url="https://cdn.example.com/2.mp3",
                length="200",
            ),
            rss_item(title="Broken", url=None),
        ],
        channel_title="Scenario Show",
    )


class TestPodcastSynchronizerUnit:
    """Unit tests for PodcastSynchronizer.synchronize."""

    @pytest.mark.asyncio
    async def test_downloads_missing_episodes_in_date_order(self, sync_config):
        downloader = Mock()
        downloader.download_episode = AsyncMock()
        synchronizer = PodcastSynchronizer(
            sync_config,
            feed_processor=_feed_processor(_scenario_feed(), sync_config),
            downloader=downloader,
        )

        result = await synchronizer.synchronize(FEED_URL)

        titles = [call.args[1].title for call in downloader.download_episode.await_args_list]
        assert titles == ["New Year", "Second Day", "Third Day"]
        assert result == SyncResult(
            channel_title="Scenario Show", total=3, missing=3, downloaded=3
        )

    @pytest.mark.asyncio
    async def test_skips_episodes_already_on_disk(self, sync_config):
        feed_processor = _feed_processor(_scenario_feed(), sync_config)
        feed = feed_processor.parse_feed(_scenario_feed())
        second = feed.episodes[1]
        path = build_file_path(feed.channel_title, second, sync_config.root)
        path.parent.mkdir(parents=True)
        path.write_bytes(b"x" * second.size)

        downloader = Mock()
        downloader.download_episode = AsyncMock()
        synchronizer = PodcastSynchronizer(
            sync_config, feed_processor=feed_processor, downloader=downloader
        )

        result = await synchronizer.synchronize(FEED_URL)

        titles = [call.args[1].title for call in downloader.download_episode.await_args_list]
        assert titles == ["New Year", "Third Day"]
        assert result.missing == 2

    @pytest.mark.asyncio
    async def test_progress_lines(self, sync_config, caplog):
        downloader = Mock()
        downloader.download_episode = AsyncMock()
        synchronizer = PodcastSynchronizer(
            sync_config,
            feed_processor=_feed_processor(_scenario_feed(), sync_config),
            downloader=downloader,
        )

        with caplog.at_level(logging.INFO, logger="podsync"):
            await synchronizer.synchronize(FEED_URL)

        messages = [record.getMessage() for record in caplog.records]
        assert "Fetched 3 items from Scenario Show" in messages
        assert "Found 3 missing items." in messages
        assert "Processing New Year. 1 of 3" in messages
        assert "Processing Second Day. 2 of 3" in messages
        assert "Processing Third Day. 3 of 3" in messages

    @pytest.mark.asyncio
    async def test_second_run_downloads_nothing(self, sync_config):
        def write_file(feed, episode):
            path = build_file_path(feed.channel_title, episode, sync_config.root)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"x" * episode.size)
            return path

        downloader = Mock()
        downloader.download_episode = AsyncMock(side_effect=write_file)
        synchronizer = PodcastSynchronizer(
            sync_config,
            feed_processor=_feed_processor(_scenario_feed(), sync_config),
            downloader=downloader,
        )

        first = await synchronizer.synchronize(FEED_URL)
        second = await synchronizer.synchronize(FEED_URL)

        assert first.downloaded == 3
        assert second.missing == 0
        assert second.downloaded == 0

    @pytest.mark.asyncio
    async def test_download_failure_aborts_pass(self, sync_config):
        downloader = Mock()
        downloader.download_episode = AsyncMock(
            side_effect=[None, EpisodeDownloadError("boom"), None]
        )
        synchronizer = PodcastSynchronizer(
            sync_config,
            feed_processor=_feed_processor(_scenario_feed(), sync_config),
            downloader=downloader,
        )

        with pytest.raises(EpisodeDownloadError):
            await synchronizer.synchronize(FEED_URL)

        assert downloader.download_episode.await_count == 2

    @pytest.mark.asyncio
    async def test_feed_failure_propagates(self, sync_config):
        feed_processor = Mock()
        feed_processor.load_feed.side_effect = FeedFetchError("offline")
        downloader = Mock()
        downloader.download_episode = AsyncMock()
        synchronizer = PodcastSynchronizer(
            sync_config, feed_processor=feed_processor, downloader=downloader
        )

        with pytest.raises(FeedFetchError):
            await synchronizer.synchronize(FEED_URL)

        downloader.download_episode.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_module_level_synchronize(self, sync_config):
        expected = SyncResult("Show", 0, 0, 0)
        with patch("podsync.sync.PodcastSynchronizer") as synchronizer_class:
            synchronizer_class.return_value.synchronize = AsyncMock(return_value=expected)

            result = await synchronize(FEED_URL, sync_config)

        synchronizer_class.assert_called_once_with(sync_config)
        assert result is expected
