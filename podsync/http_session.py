"""HTTP session setup shared by the feed fetcher and the episode downloader."""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import SyncConfig

logger = logging.getLogger(__name__)

HTTP_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
HTTP_RETRY_ALLOWED_METHODS = frozenset({"GET", "HEAD"})


def create_session(config: SyncConfig) -> requests.Session:
    """Create a requests session carrying the configured User-Agent.

    Retries are only mounted when ``config.retry_attempts`` is positive;
    the default session fails on the first transport error.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": config.user_agent})

    if config.retry_attempts > 0:
        retry = Retry(
            total=config.retry_attempts,
            connect=config.retry_attempts,
            read=config.retry_attempts,
            status=config.retry_attempts,
            backoff_factor=config.backoff_factor,
            status_forcelist=HTTP_RETRY_STATUS_CODES,
            allowed_methods=HTTP_RETRY_ALLOWED_METHODS,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        logger.debug(
            "Configured HTTP session with %d retry attempts", config.retry_attempts
        )

    return session
