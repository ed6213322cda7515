from __future__ import annotations

import math
import re

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_HOUR = 60


def is_valid_time(value: object) -> bool:
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def parse_time_into_minutes(time_str: str) -> int:
    """Return the minute of day for an ``HH:mm`` string.

    The value is not range checked, validate with :func:`is_valid_time` first.
    """
    hours, minutes = time_str.split(":")
    return int(hours) * MINUTES_PER_HOUR + int(minutes)


def calculate_duration(start: str, end: str) -> int:
    """Signed minutes between two times of the same day.

    Negative when ``end`` is before ``start``; a midnight crossing is never
    folded into the next day.
    """
    return parse_time_into_minutes(end) - parse_time_into_minutes(start)


def format_time(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def format_duration(minutes: int) -> str:
    """Render minutes as ``"Xh Ym"``.

    Hours are floored while the remainder keeps the sign of ``minutes``, so
    ``-30`` renders as ``"-1h 30m"``.
    """
    hours = math.floor(minutes / MINUTES_PER_HOUR)
    remaining_minutes = int(math.fmod(minutes, MINUTES_PER_HOUR))

    if hours == 0:
        return f"{remaining_minutes}m"
    if remaining_minutes == 0:
        return f"{hours}h"
    return f"{hours}h {abs(remaining_minutes)}m"
