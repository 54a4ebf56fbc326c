"""Transform mirror API payloads into MusicUnit objects."""

import logging
from typing import Any, Dict, List

from .models import MusicUnit

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v="


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as "minutes:seconds".

    The seconds component is not zero padded.

    Args:
        seconds: Total duration in seconds

    Returns:
        Display string

    Raises:
        ValueError: If seconds is negative

    Examples:
        >>> format_duration(271)
        '4:31'
        >>> format_duration(65)
        '1:5'
        >>> format_duration(0)
        '0:0'
    """
    if seconds < 0:
        raise ValueError(f"duration must be >= 0, got {seconds}")
    return f"{seconds // 60}:{seconds % 60}"


def _to_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


def parse_duration(text: str) -> int:
    """Parse a "minutes:seconds" string into total seconds.

    A component that is not a number counts as zero.

    Args:
        text: Duration string

    Returns:
        Total seconds

    Raises:
        ValueError: If text has no ":" separator

    Examples:
        >>> parse_duration("4:31")
        271
        >>> parse_duration(" 12 : 7 ")
        727
        >>> parse_duration("x:30")
        30
    """
    minutes, sep, seconds = text.partition(":")
    if not sep:
        raise ValueError(f"duration must be formatted as minutes:seconds, got {text!r}")
    return 60 * _to_int(minutes) + _to_int(seconds)


def watch_url(video_id: str) -> str:
    """Build the watch URL used as a MusicUnit path."""
    return WATCH_URL + video_id


def transform_music_unit(item: Dict[str, Any]) -> MusicUnit:
    """Map one API result object to a MusicUnit.

    Only videoId, title, author and lengthSeconds are read, other keys are
    ignored.

    Raises:
        KeyError: If a required field is missing
        TypeError: If a field has the wrong type
    """
    video_id = item["videoId"]
    title = item["title"]
    author = item["author"]
    length = item["lengthSeconds"]

    if not all(isinstance(value, str) for value in (video_id, title, author)):
        raise TypeError("videoId, title and author must be strings")
    # bool is an int subclass but never a valid length
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f"lengthSeconds must be an integer, got {type(length).__name__}")

    return MusicUnit(
        name=title,
        artist=author,
        duration=format_duration(length),
        path=watch_url(video_id),
    )


def transform_music_units(payload: Any) -> List[MusicUnit]:
    """Map a decoded JSON array of API results to MusicUnit objects.

    The whole payload is rejected if any element fails to map.

    Args:
        payload: Decoded JSON body

    Returns:
        List of MusicUnit in response order

    Raises:
        TypeError: If payload is not a list of objects
        KeyError: If an element misses a required field
        ValueError: If an element has a negative length
    """
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")

    units = []
    for item in payload:
        if not isinstance(item, dict):
            raise TypeError(f"expected a JSON object, got {type(item).__name__}")
        units.append(transform_music_unit(item))

    logger.debug(f"Transformed {len(units)} music units")
    return units
