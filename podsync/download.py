"""Episode downloader for podsync."""

import asyncio
from pathlib import Path

import requests

from .config import SyncConfig
from .errors import EpisodeDownloadError
from .http_session import create_session
from .logging_config import create_execution_logger
from .models import Episode, Feed
from .paths import build_file_path


class EpisodeDownloader:
    """Streams episode audio from its enclosure URL into the local library."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the downloader.

        Args:
            config: Synchronization settings (root directory, timeout, chunk size)
            session: Optional pre-built HTTP session
            execution_id: Execution ID for logging context
        """
        self.config = config or SyncConfig()
        self.session = session or create_session(self.config)
        self.logger = create_execution_logger("downloader", execution_id)

    async def download_episode(self, feed: Feed, episode: Episode) -> Path:
        """Download an episode to its target path.

        Parent directories are created as needed. A partially written file is
        left in place; the size check of the next run treats it as missing.

        Returns:
            Path of the written file

        Raises:
            EpisodeDownloadError: If the request or the file write fails
        """
        file_path = build_file_path(feed.channel_title, episode, self.config.root)
        await asyncio.to_thread(self._download_sync, episode, file_path)
        self.logger.info(
            f"Downloaded {episode.title}",
            item_title=episode.title,
            file_path=str(file_path),
        )
        return file_path

    def _download_sync(self, episode: Episode, file_path: Path) -> None:
        """Blocking download, run in a worker thread."""
        try:
            with self.session.get(
                episode.url, stream=True, timeout=self.config.timeout
            ) as response:
                response.raise_for_status()
                file_path.parent.mkdir(parents=True, exist_ok=True)
                with open(file_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download {episode.url}: {e}",
                item_title=episode.title,
                error=str(e),
            )
            raise EpisodeDownloadError(
                f"Failed to download {episode.title} from {episode.url}: {e}"
            ) from e
        except OSError as e:
            self.logger.error(
                f"Failed to write {file_path}: {e}",
                item_title=episode.title,
                file_path=str(file_path),
                error=str(e),
            )
            raise EpisodeDownloadError(f"Failed to write {file_path}: {e}") from e
