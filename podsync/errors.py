"""Custom exceptions for podsync."""


class PodsyncError(Exception):
    """Base exception for all podsync errors."""

    pass


class FeedFetchError(PodsyncError):
    """The feed document could not be retrieved."""

    pass


class EpisodeDownloadError(PodsyncError):
    """An episode could not be fetched or written to disk."""

    pass
