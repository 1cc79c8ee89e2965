"""Deterministic local file paths for downloaded episodes."""

import re
import unicodedata
from datetime import UTC
from pathlib import Path

from .models import Episode

AUDIO_EXTENSION = ".mp3"

# Letters NFKD leaves intact that still have an obvious ASCII spelling
_TRANSLITERATIONS = str.maketrans(
    {
        "ß": "ss",
        "æ": "ae",
        "Æ": "AE",
        "œ": "oe",
        "Œ": "OE",
        "ø": "o",
        "Ø": "O",
        "đ": "d",
        "Đ": "D",
        "ł": "l",
        "Ł": "L",
        "þ": "th",
        "Þ": "TH",
        "ð": "d",
        "Ð": "D",
    }
)
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Normalize text to a lowercase, space-separated, ASCII-only slug.

    Hyphens become spaces, diacritics are stripped, and every run of
    characters outside ``[a-z0-9]`` collapses to a single space.
    """
    text = text.replace("-", " ").translate(_TRANSLITERATIONS)
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALPHANUMERIC.sub(" ", text).strip()


def build_file_name(channel_title: str, episode: Episode) -> str:
    """Build ``<channel slug> <YYYY-MM-DD> <title slug>`` for an episode."""
    date_str = episode.published.astimezone(UTC).strftime("%Y-%m-%d")
    return f"{slugify(channel_title)} {date_str} {slugify(episode.title)}"


def build_file_path(channel_title: str, episode: Episode, root: Path) -> Path:
    """Build the path an episode is stored at under ``root``."""
    return (
        Path(root)
        / slugify(channel_title)
        / f"{build_file_name(channel_title, episode)}{AUDIO_EXTENSION}"
    )
