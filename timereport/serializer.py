from __future__ import annotations

from typing import Iterable, List

from .parser import FIELD_SEPARATOR
from .schemas import ReportEntry
from .time_strings import parse_time_into_minutes


def _entry_line(entry: ReportEntry) -> str:
    fields = [entry.time.start]
    if entry.project:
        fields.append(entry.project)
        if entry.activity and entry.description:
            fields.extend([entry.activity, entry.description])
        elif entry.description:
            fields.append(entry.description)
    return FIELD_SEPARATOR.join(fields)


def _boundary_line(time_str: str) -> str:
    return f"{time_str}{FIELD_SEPARATOR}"


def serialize_report(entries: Iterable[ReportEntry]) -> str:
    """Write entries back into the line format read by :func:`parse_report`.

    Entries without a description are skipped and the rest are written in
    chronological order. Contiguous entries share their timestamp line; a gap
    or the end of the day gets a boundary-only line.
    """
    ordered: List[ReportEntry] = sorted(
        (entry for entry in entries if entry.description),
        key=lambda entry: parse_time_into_minutes(entry.time.start),
    )
    lines: List[str] = []
    for index, entry in enumerate(ordered):
        next_entry = ordered[index + 1] if index + 1 < len(ordered) else None
        lines.append(_entry_line(entry))
        if next_entry is None or next_entry.time.start != entry.time.end:
            lines.append(_boundary_line(entry.time.end))
    return "".join(f"{line}\n" for line in lines)
