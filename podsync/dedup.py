"""Deduplication module for podsync.

An episode counts as already downloaded when a file exists at its target
path and the file's size is close enough to the size the feed declares.
"""

import asyncio
import stat
from pathlib import Path

from .config import SyncConfig
from .logging_config import create_execution_logger
from .models import Episode, Feed
from .paths import build_file_path


def similarity(a: int, b: int) -> float:
    """Return ``1 - |a - b| / (a + b)``, a closeness score in [0, 1].

    Two zero sizes score 0.0: an empty file is never a complete download.
    """
    total = a + b
    if total <= 0:
        return 0.0
    return 1 - abs(a - b) / total


class Deduplicator:
    """Decides whether a feed episode already exists on local disk."""

    def __init__(self, config: SyncConfig | None = None, execution_id: str | None = None):
        """Initialize the Deduplicator.

        Args:
            config: Synchronization settings (root directory, threshold)
            execution_id: Execution ID for logging context
        """
        self.config = config or SyncConfig()
        self.logger = create_execution_logger("deduplicator", execution_id)

    async def is_already_downloaded(self, feed: Feed, episode: Episode) -> bool:
        """Check whether the episode's target file exists with a matching size."""
        file_path = build_file_path(feed.channel_title, episode, self.config.root)
        local_size = await self._local_size(file_path)
        if local_size is None:
            return False

        score = similarity(local_size, episode.size)
        if score < self.config.similarity_threshold:
            self.logger.warning(
                f"Size mismatch for {episode.title}: local {local_size} bytes, "
                f"declared {episode.size} bytes (similarity {score:.4f})",
                item_title=episode.title,
                file_path=str(file_path),
                local_size=local_size,
                declared_size=episode.size,
                similarity=score,
            )
            return False

        self.logger.log_item_processing(episode.title, "skipped_existing")
        return True

    async def _local_size(self, file_path: Path) -> int | None:
        """Size of the file in bytes, or None if there is no regular file."""
        try:
            stat_result = await asyncio.to_thread(file_path.stat)
        except FileNotFoundError:
            return None
        if not stat.S_ISREG(stat_result.st_mode):
            return None
        return stat_result.st_size
