"""Command line access to the report files.

Usage:
    python -m timereport show 20240102
    python -m timereport summary --from 20240101 --to 20240331 --period weekly
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .aggregator import sorted_groups, total_duration
from .config import settings
from .date_strings import is_valid_date_string
from .reports import load_day, summarize
from .schemas import InvalidReport, PeriodDurations
from .storage import ReportStorage, StorageError, build_storage
from .time_strings import format_duration

logger = logging.getLogger(__name__)

PERIOD_CHOICES = ("daily", "weekly", "monthly", "quarterly", "yearly")
GROUP_CHOICES = ("project", "activity", "description")


def _date_argument(value: str) -> str:
    if not is_valid_date_string(value):
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected yyyyMMdd)")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=settings.app_name, description="Inspect plain-text time reports")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print the entries of one day")
    show.add_argument("date", type=_date_argument, help="Day as yyyyMMdd")

    summary = subparsers.add_parser("summary", help="Print totals for a date range")
    summary.add_argument("--from", dest="start", type=_date_argument, required=True, help="First day (yyyyMMdd)")
    summary.add_argument("--to", dest="end", type=_date_argument, required=True, help="Last day (yyyyMMdd)")
    summary.add_argument("--period", choices=PERIOD_CHOICES, default="monthly")
    summary.add_argument("--group", choices=GROUP_CHOICES, default="project")
    summary.add_argument("--json", action="store_true", help="Print the totals as JSON")
    return parser


def _show(storage: ReportStorage, date_str: str) -> int:
    report = load_day(storage, date_str)
    if isinstance(report, InvalidReport):
        for issue in report.issues:
            print(f"line {issue.line}: {issue.message} ({issue.input!r})")
        return 1
    if not report.entries:
        print("No entries")
    for entry in report.entries:
        labels = [entry.project, entry.activity, entry.description]
        label = " / ".join(value for value in labels if value)
        print(f"{entry.time.start}-{entry.time.end}  {format_duration(entry.duration):>8}  {label}")
    if report.has_negative_duration:
        print("Report contains negative durations")
    return 0


def _period_lines(key: str, durations: PeriodDurations, group: str) -> List[str]:
    flags = []
    if durations.has_negative_duration:
        flags.append("negative durations")
    if durations.has_issues:
        flags.append("malformed reports")
    suffix = f"  ({', '.join(flags)})" if flags else ""
    lines = [f"{key}  {format_duration(durations.total_duration)}{suffix}"]
    for label, grouped in sorted_groups(durations.groups(group)):
        lines.append(f"    {label:<40} {format_duration(grouped.duration):>8}")
    return lines


def _summary(storage: ReportStorage, args: argparse.Namespace) -> int:
    if args.end < args.start:
        print("--to must not be before --from", file=sys.stderr)
        return 2
    aggregates = summarize(storage, args.start, args.end)
    periods = aggregates.period(args.period)
    if args.json:
        payload = {key: value.model_dump(mode="json") for key, value in periods.items()}
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0
    for key in sorted(periods):
        print("\n".join(_period_lines(key, periods[key], args.group)))
    print(f"Total  {format_duration(total_duration(aggregates.daily.values()))}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    storage = build_storage(settings)
    try:
        if args.command == "show":
            return _show(storage, args.date)
        return _summary(storage, args)
    except StorageError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
