from __future__ import annotations

import datetime as dt
import re

DATE_FORMAT = "%Y%m%d"

DATE_PATTERN = re.compile(r"^\d{4}(0[1-9]|1[0-2])(0[1-9]|[12]\d|3[01])$")


def is_valid_date_string(value: object) -> bool:
    return isinstance(value, str) and DATE_PATTERN.match(value) is not None


def parse_date_string(date_str: str) -> dt.date:
    """Parse a ``yyyyMMdd`` key into a calendar date."""
    return dt.datetime.strptime(date_str, DATE_FORMAT).date()


def format_date_string(day: dt.date) -> str:
    return day.strftime(DATE_FORMAT)


def is_calendar_date(date_str: str) -> bool:
    try:
        parse_date_string(date_str)
    except ValueError:
        return False
    return True


def rolled_over_date(date_str: str) -> dt.date:
    """Calendar date for a ``yyyyMMdd`` key, counting excess days into the next month.

    ``20240231`` becomes 2024-03-02.
    """
    first = dt.date(int(date_str[:4]), int(date_str[4:6]), 1)
    return first + dt.timedelta(days=int(date_str[6:8]) - 1)


def week_start_key(date_str: str) -> str:
    """Key of the Monday that starts the ISO week containing ``date_str``."""
    day = rolled_over_date(date_str)
    return format_date_string(day - dt.timedelta(days=day.weekday()))


def month_key(date_str: str) -> str:
    return date_str[:6]


def quarter_key(month_str: str) -> str:
    """``yyyyMM`` (or a longer day key) to ``yyyyQ``."""
    quarter = (int(month_str[4:6]) - 1) // 3 + 1
    return f"{month_str[:4]}{quarter}"


def year_key(period_str: str) -> str:
    return period_str[:4]
