"""Configuration management for podsync."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ROOT = "podcasts"
DEFAULT_BATCH_SIZE = 20
DEFAULT_SIMILARITY_THRESHOLD = 0.98
DEFAULT_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 1024 * 256
DEFAULT_USER_AGENT = "podsync/1.0 (Podcast feed synchronizer)"


@dataclass
class SyncConfig:
    """Settings shared by the diff, download and orchestration steps."""

    root: Path = Path(DEFAULT_ROOT)
    batch_size: int = DEFAULT_BATCH_SIZE
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    timeout: int = DEFAULT_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    user_agent: str = DEFAULT_USER_AGENT
    retry_attempts: int = 0
    backoff_factor: float = 0.5

    def __post_init__(self):
        self.root = Path(self.root)
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if not 0 < self.similarity_threshold <= 1:
            raise ValueError(
                "similarity_threshold must be in (0, 1], "
                f"got {self.similarity_threshold}"
            )
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
        if self.retry_attempts < 0:
            raise ValueError(
                f"retry_attempts cannot be negative, got {self.retry_attempts}"
            )


@dataclass
class LoggingConfig:
    """Configuration for console logging."""

    level: str = "INFO"
    json_output: bool = False


class Config:
    """Main configuration manager, backed by environment variables."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.root = os.getenv("PODSYNC_ROOT", DEFAULT_ROOT)
        self.batch_size = os.getenv("PODSYNC_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))
        self.similarity_threshold = os.getenv(
            "PODSYNC_SIMILARITY_THRESHOLD", str(DEFAULT_SIMILARITY_THRESHOLD)
        )
        self.timeout = os.getenv("PODSYNC_TIMEOUT", str(DEFAULT_TIMEOUT))
        self.retry_attempts = os.getenv("PODSYNC_RETRY_ATTEMPTS", "0")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "text")

    def get_sync_config(self) -> SyncConfig:
        """Get synchronization configuration.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is out of range
        """
        return SyncConfig(
            root=Path(self.root),
            batch_size=_parse_number("PODSYNC_BATCH_SIZE", self.batch_size, int),
            similarity_threshold=_parse_number(
                "PODSYNC_SIMILARITY_THRESHOLD", self.similarity_threshold, float
            ),
            timeout=_parse_number("PODSYNC_TIMEOUT", self.timeout, int),
            retry_attempts=_parse_number(
                "PODSYNC_RETRY_ATTEMPTS", self.retry_attempts, int
            ),
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return LoggingConfig(
            level=self.log_level.upper(),
            json_output=self.log_format.strip().lower() == "json",
        )


def _parse_number(name: str, value: str, kind: type):
    try:
        return kind(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {value!r}") from e
