"""
Source probing: playable duration of a sound file.

Uses mutagen stream info, so no decoding happens. Supported containers are
keyed by lowercase file extension.
"""

import logging
from pathlib import Path
from typing import Callable, Union

from mutagen.flac import FLAC
from mutagen.mp3 import MP3
from mutagen.wave import WAVE

from tapecut.errors import UnknownFormat

logger = logging.getLogger(__name__)

Probe = Callable[[Path], float]

_READERS = {
    "mp3": MP3,
    "wav": WAVE,
    "flac": FLAC,
}

SUPPORTED_FORMATS = tuple(_READERS)


def audio_format(path: Union[str, Path]) -> str:
    """Lowercase extension of path without the dot."""
    return Path(path).suffix.lstrip(".").lower()


def probe_duration(path: Union[str, Path]) -> float:
    """
    Return the playable duration of a sound file in seconds.

    Args:
        path: Path to an mp3, wav or flac file

    Returns:
        Duration in seconds

    Raises:
        UnknownFormat: If the extension is not supported
    """
    path = Path(path)
    reader = _READERS.get(audio_format(path))
    if reader is None:
        raise UnknownFormat(path)

    length = reader(path).info.length
    logger.debug(f"Probed {path}: {length:.3f}s")
    return float(length)
