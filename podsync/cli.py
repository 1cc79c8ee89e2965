"""
Command-line interface for podsync.

Usage:
    podsync https://example.com/feed.xml            # Download missing episodes
    podsync URL --root ~/Music/podcasts             # Use another library root
    podsync URL --batch-size 50 --log-level DEBUG   # Tune the existence checks
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from .config import Config
from .errors import PodsyncError
from .logging_config import create_execution_logger, setup_structured_logging
from .sync import PodcastSynchronizer

USAGE_MESSAGE = "Please provide a feed URL as a command line argument."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podsync",
        description="Download the episodes of a podcast feed that are not yet on disk.",
    )
    parser.add_argument("feed_url", nargs="?", help="URL of the podcast RSS feed")
    parser.add_argument("--root", type=Path, help="Library root (default: ./podcasts)")
    parser.add_argument(
        "--batch-size", type=int, help="Existence checks run concurrently (default: 20)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Minimum size similarity for a file to count as downloaded (default: 0.98)",
    )
    parser.add_argument("--timeout", type=int, help="HTTP timeout in seconds (default: 30)")
    parser.add_argument(
        "--retries", type=int, help="Retry attempts for failed HTTP requests (default: 0)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    if not args.feed_url:
        print(USAGE_MESSAGE)
        return 1

    config = Config()
    logging_config = config.get_logging_config()
    setup_structured_logging(
        args.log_level or logging_config.level,
        json_output=args.json_logs or logging_config.json_output,
    )
    logger = create_execution_logger("cli")

    try:
        sync_config = config.get_sync_config()
        overrides = {
            "root": args.root,
            "batch_size": args.batch_size,
            "similarity_threshold": args.threshold,
            "timeout": args.timeout,
            "retry_attempts": args.retries,
        }
        sync_config = replace(
            sync_config, **{k: v for k, v in overrides.items() if v is not None}
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    synchronizer = PodcastSynchronizer(sync_config)
    try:
        asyncio.run(synchronizer.synchronize(args.feed_url))
    except PodsyncError as e:
        logger.error(str(e), feed_url=args.feed_url)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
