from __future__ import annotations

from .aggregator import aggregate
from .parser import parse_day, parse_report
from .schemas import (
    Aggregates,
    GroupedDuration,
    InvalidReport,
    Issue,
    ParsedReport,
    PeriodDurations,
    ReportEntry,
    TimeInterval,
)
from .serializer import serialize_report
from .time_strings import calculate_duration, format_duration, parse_time_into_minutes
from .validation import validate_entry_form

__all__ = [
    "Aggregates",
    "GroupedDuration",
    "InvalidReport",
    "Issue",
    "ParsedReport",
    "PeriodDurations",
    "ReportEntry",
    "TimeInterval",
    "aggregate",
    "calculate_duration",
    "format_duration",
    "parse_day",
    "parse_report",
    "parse_time_into_minutes",
    "serialize_report",
    "validate_entry_form",
]
