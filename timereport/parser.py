from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from .schemas import DayReport, InvalidReport, Issue, ParsedReport, ReportEntry, Reports
from .time_strings import is_valid_time

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = " - "

TIME_FORMAT_MESSAGE = "Invalid time format (expected HH:mm)"


def _split_lines(text: str) -> List[Tuple[int, str]]:
    """Non-blank lines paired with their 1-based line number in ``text``."""
    return [(number, line) for number, line in enumerate(text.split("\n"), start=1) if line.strip()]


def _time_token(line: str) -> str:
    return line.split(FIELD_SEPARATOR)[0].strip()


def _clean(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def _split_fields(line: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return ``(project, activity, description)`` for a report line.

    Three fields mean ``time - project - description``; from four fields on
    the third is the activity and the rest, rejoined, the description.
    """
    parts = line.split(FIELD_SEPARATOR)
    project: Optional[str] = None
    activity: Optional[str] = None
    description: Optional[str] = None
    if len(parts) >= 2:
        project = _clean(parts[1])
    if len(parts) >= 4:
        activity = _clean(parts[2])
        description = _clean(FIELD_SEPARATOR.join(parts[3:]))
    elif len(parts) == 3:
        description = _clean(parts[2])
    return project, activity, description


def _time_issues(start: str, start_line: int, end: str, end_line: int) -> List[Issue]:
    issues: List[Issue] = []
    if not is_valid_time(start):
        issues.append(
            Issue(path="start", message=TIME_FORMAT_MESSAGE, code="time_format", input=start, line=start_line)
        )
    if not is_valid_time(end):
        issues.append(
            Issue(path="end", message=TIME_FORMAT_MESSAGE, code="time_format", input=end, line=end_line)
        )
    return issues


def parse_report(text: str) -> DayReport:
    """Parse the raw text of one day.

    Each line starts an interval that ends at the timestamp of the following
    line. A malformed timestamp aborts the whole day.
    """
    lines = _split_lines(text)
    entries: List[ReportEntry] = []
    has_negative_duration = False

    for index in range(len(lines) - 1):
        start_line, current_line = lines[index]
        end_line, next_line = lines[index + 1]
        start = _time_token(current_line)
        end = _time_token(next_line)

        issues = _time_issues(start, start_line, end, end_line)
        if issues:
            logger.debug("Aborting report parse at line %d: %r", start_line, current_line)
            return InvalidReport(issues=issues)

        project, activity, description = _split_fields(current_line)
        entry = ReportEntry.build(start, end, project, activity, description)
        if entry.duration < 0:
            has_negative_duration = True
        if entry.project and entry.description:
            entries.append(entry)

    return ParsedReport(entries=entries, has_negative_duration=has_negative_duration)


def parse_day(raw_text: Optional[str]) -> DayReport:
    if raw_text is None:
        return ParsedReport()
    return parse_report(raw_text)


def parse_reports(raw_texts: Mapping[str, Optional[str]]) -> Reports:
    return {date_str: parse_day(text) for date_str, text in raw_texts.items()}
