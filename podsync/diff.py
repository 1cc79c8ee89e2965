"""Batched comparison of a feed against the local library."""

import asyncio
from collections.abc import Iterator, Sequence
from typing import TypeVar

from .config import SyncConfig
from .dedup import Deduplicator
from .logging_config import create_execution_logger
from .models import Episode, Feed

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``items`` holding at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


class DiffEngine:
    """Finds the feed episodes that are not yet on local disk."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        deduplicator: Deduplicator | None = None,
        execution_id: str | None = None,
    ):
        self.config = config or SyncConfig()
        self.deduplicator = deduplicator or Deduplicator(self.config, execution_id)
        self.logger = create_execution_logger("diff_engine", execution_id)

    async def filter_missing(self, feed: Feed) -> list[Episode]:
        """Return the episodes still to download, in feed order.

        Existence checks run concurrently within a batch of
        ``config.batch_size`` episodes; each batch completes before the next
        starts. Any failing check aborts the whole computation and cancels the
        checks still running in its batch.
        """
        missing: list[Episode] = []
        for batch_number, batch in enumerate(
            chunked(feed.episodes, self.config.batch_size), start=1
        ):
            # A failing check cancels the rest of its batch
            try:
                async with asyncio.TaskGroup() as group:
                    checks = [
                        group.create_task(
                            self.deduplicator.is_already_downloaded(feed, episode)
                        )
                        for episode in batch
                    ]
            except ExceptionGroup as failures:
                raise failures.exceptions[0]
            downloaded = [check.result() for check in checks]
            missing.extend(
                episode for episode, present in zip(batch, downloaded) if not present
            )
            self.logger.debug(
                f"Checked batch {batch_number}",
                batch_size=len(batch),
                missing_so_far=len(missing),
            )
        return missing
