"""
Timecode helpers.

Analysis records carry times either as plain seconds or as SS, MM:SS and
HH:MM:SS strings (fractional seconds allowed in the last field).
"""

import math
import re
from typing import Union

from .errors import MalformedTimecode

_NUMBER = re.compile(r"^\d+(\.\d+)?$")


def parse_timecode(value: Union[str, int, float]) -> float:
    """
    Convert a timecode to seconds.

    Accepts numbers and the SS / MM:SS / HH:MM:SS string forms.
    Raises MalformedTimecode for anything else, including negative or
    non-finite values.
    """
    if isinstance(value, bool):
        raise MalformedTimecode(value)

    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            raise MalformedTimecode(value)
        return float(value)

    if not isinstance(value, str):
        raise MalformedTimecode(value)

    parts = value.strip().split(":")
    if not 1 <= len(parts) <= 3 or any(not _NUMBER.match(p) for p in parts):
        raise MalformedTimecode(value)

    # Only the last field may carry a fraction
    if any("." in p for p in parts[:-1]):
        raise MalformedTimecode(value)

    seconds = float(parts[-1])
    if len(parts) == 1:
        return seconds

    if seconds >= 60:
        raise MalformedTimecode(value)

    minutes = int(parts[-2])
    if len(parts) == 2:
        return minutes * 60 + seconds

    if minutes >= 60:
        raise MalformedTimecode(value)

    hours = int(parts[0])
    return hours * 3600 + minutes * 60 + seconds


def format_timecode(seconds: float) -> str:
    """Format seconds as MM:SS.ss, or HH:MM:SS.ss past the first hour."""
    seconds = max(0.0, seconds)
    hours = int(seconds // 3600)
    mins = int((seconds % 3600) // 60)
    secs = seconds % 60

    if hours:
        return f"{hours:02d}:{mins:02d}:{secs:05.2f}"
    return f"{mins:02d}:{secs:05.2f}"
