from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Any, List, Mapping, Optional, Tuple

from .aggregator import aggregate
from .date_strings import format_date_string
from .parser import parse_day, parse_report, parse_reports
from .schemas import (
    Aggregates,
    DayReport,
    EntryFormRejected,
    EntryFormResult,
    InvalidReport,
    Issue,
    ReportEntry,
    Reports,
)
from .serializer import serialize_report
from .storage import ReportStorage
from .time_strings import format_time
from .validation import form_values, validate_entry_form

logger = logging.getLogger(__name__)

QUARTER_HOUR = 15


def load_day(storage: ReportStorage, date_str: str) -> DayReport:
    return parse_day(storage.read_raw_text(date_str))


def load_reports(storage: ReportStorage, start: str, end: str) -> Reports:
    """Parse every stored day between ``start`` and ``end`` (inclusive)."""
    return parse_reports(storage.read_raw_text_range(start, end))


def summarize(storage: ReportStorage, start: str, end: str) -> Aggregates:
    return aggregate(load_reports(storage, start, end))


def _locked_issue(report: DayReport) -> Optional[Issue]:
    if isinstance(report, InvalidReport):
        return Issue(
            path="date",
            code="report_locked",
            message="Report contains malformed times and has to be fixed manually",
        )
    if report.has_negative_duration:
        return Issue(
            path="date",
            code="report_locked",
            message="Report contains negative durations and has to be fixed first",
        )
    return None


def _write_entries(storage: ReportStorage, date_str: str, entries: List[ReportEntry]) -> None:
    storage.write_raw_text(date_str, serialize_report(entries))


def save_entry(storage: ReportStorage, fields: Mapping[str, Any]) -> EntryFormResult:
    """Validate a submitted entry and write it into its day.

    ``entry_index`` equal to the number of existing entries appends a new
    entry, a smaller index replaces the entry at that position.
    """
    result = validate_entry_form(fields)
    if isinstance(result, EntryFormRejected):
        return result

    report = load_day(storage, result.date)
    issue = _locked_issue(report)
    if issue is None and result.entry_index > len(report.entries):
        issue = Issue(
            path="entry_index",
            code="entry_index_range",
            message=f"Entry index must be between 0 and {len(report.entries)}",
            input=result.entry_index,
        )
    if issue is not None:
        return EntryFormRejected(issues=[issue], values=form_values(fields))

    entries = list(report.entries)
    if result.entry_index == len(entries):
        entries.append(result.entry)
    else:
        entries[result.entry_index] = result.entry
    _write_entries(storage, result.date, entries)
    logger.info("Saved entry %d of report %s", result.entry_index, result.date)
    return result


def delete_entry(storage: ReportStorage, date_str: str, entry_index: int) -> DayReport:
    """Remove one entry and return the day as stored afterwards.

    A day that is malformed or has negative durations is returned unchanged.
    """
    report = load_day(storage, date_str)
    if _locked_issue(report) is not None:
        logger.info("Not deleting from locked report %s", date_str)
        return report
    if not 0 <= entry_index < len(report.entries):
        raise ValueError(f"Report {date_str} has no entry {entry_index}")

    entries = [entry for index, entry in enumerate(report.entries) if index != entry_index]
    text = serialize_report(entries)
    storage.write_raw_text(date_str, text)
    logger.info("Deleted entry %d of report %s", entry_index, date_str)
    return parse_report(text)


def default_entry_times(
    report: Optional[DayReport],
    date_str: str,
    entry_index: Optional[int],
    now: dt.datetime,
) -> Tuple[str, str]:
    """Suggested ``(start, end)`` for the entry form.

    The previous entry's end is the default start. On the current day the
    start falls back to now rounded down to a quarter hour and the end is now
    rounded up to the next quarter hour.
    """
    entries = report.entries if report is not None else None
    if entries is None:
        return "", ""

    previous: Optional[ReportEntry] = None
    if entry_index is not None and 0 < entry_index <= len(entries):
        previous = entries[entry_index - 1]
    previous_end = previous.time.end if previous else ""

    if date_str != format_date_string(now.date()):
        return previous_end, ""

    floor_minutes = now.minute // QUARTER_HOUR * QUARTER_HOUR
    ceil_quarters = math.ceil(now.minute / QUARTER_HOUR)
    ceil_hours, ceil_minutes = now.hour, ceil_quarters * QUARTER_HOUR
    if ceil_minutes == 60:
        ceil_hours, ceil_minutes = now.hour + 1, 0
    if ceil_hours > 23:
        ceil_hours, ceil_minutes = 23, 59

    return previous_end or format_time(now.hour, floor_minutes), format_time(ceil_hours, ceil_minutes)
