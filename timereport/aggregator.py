from __future__ import annotations

import logging
from functools import reduce
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .date_strings import is_calendar_date, month_key, quarter_key, week_start_key, year_key
from .schemas import (
    Aggregates,
    DayReport,
    GroupedDuration,
    GroupType,
    InvalidReport,
    PeriodDurations,
    Reports,
)

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "/"


def _add_group(
    groups: Dict[str, GroupedDuration],
    key: str,
    group_type: GroupType,
    project: str,
    duration: int,
    activity: Optional[str] = None,
    description: Optional[str] = None,
) -> None:
    current = groups.get(key)
    if current is None:
        groups[key] = GroupedDuration(
            type=group_type,
            project=project,
            activity=activity,
            description=description,
            duration=duration,
        )
    else:
        groups[key] = current.model_copy(update={"duration": current.duration + duration})


def _merge_groups(
    left: Mapping[str, GroupedDuration],
    right: Mapping[str, GroupedDuration],
) -> Dict[str, GroupedDuration]:
    merged = dict(left)
    for key, group in right.items():
        current = merged.get(key)
        if current is None:
            merged[key] = group
        else:
            merged[key] = current.model_copy(update={"duration": current.duration + group.duration})
    return merged


def merge_period_durations(left: PeriodDurations, right: PeriodDurations) -> PeriodDurations:
    """Sum two buckets. The merge is commutative and associative."""
    return PeriodDurations(
        total_duration=left.total_duration + right.total_duration,
        by_project=_merge_groups(left.by_project, right.by_project),
        by_project_activity=_merge_groups(left.by_project_activity, right.by_project_activity),
        by_project_description=_merge_groups(left.by_project_description, right.by_project_description),
        has_negative_duration=left.has_negative_duration or right.has_negative_duration,
        has_issues=left.has_issues or right.has_issues,
    )


def day_durations(report: DayReport) -> PeriodDurations:
    """Totals for a single day; entries with negative duration are skipped."""
    if isinstance(report, InvalidReport):
        return PeriodDurations(has_issues=True)

    total = 0
    by_project: Dict[str, GroupedDuration] = {}
    by_project_activity: Dict[str, GroupedDuration] = {}
    by_project_description: Dict[str, GroupedDuration] = {}
    for entry in report.entries:
        if entry.duration < 0 or not entry.project:
            continue
        total += entry.duration
        _add_group(by_project, entry.project, "project", entry.project, entry.duration)
        if entry.activity:
            _add_group(
                by_project_activity,
                f"{entry.project}{KEY_SEPARATOR}{entry.activity}",
                "activity",
                entry.project,
                entry.duration,
                activity=entry.activity,
            )
        if entry.description:
            _add_group(
                by_project_description,
                f"{entry.project}{KEY_SEPARATOR}{entry.description}",
                "description",
                entry.project,
                entry.duration,
                description=entry.description,
            )
    return PeriodDurations(
        total_duration=total,
        by_project=by_project,
        by_project_activity=by_project_activity,
        by_project_description=by_project_description,
        has_negative_duration=report.has_negative_duration,
    )


def group_period_durations(
    durations: Mapping[str, PeriodDurations],
    period_key: Callable[[str], str],
) -> Dict[str, PeriodDurations]:
    """Fold finer buckets into coarser ones keyed by ``period_key(key)``."""
    grouped: Dict[str, List[PeriodDurations]] = {}
    for key in sorted(durations):
        grouped.setdefault(period_key(key), []).append(durations[key])
    return {key: reduce(merge_period_durations, items) for key, items in grouped.items()}


def _daily_bucket(date_str: str, report: DayReport) -> PeriodDurations:
    durations = day_durations(report)
    if is_calendar_date(date_str):
        return durations
    logger.warning("Report %s is not a calendar date", date_str)
    return durations.model_copy(update={"has_issues": True})


def calculate_daily_durations(reports: Reports) -> Dict[str, PeriodDurations]:
    return {date_str: _daily_bucket(date_str, reports[date_str]) for date_str in sorted(reports)}


def calculate_weekly_durations(daily: Mapping[str, PeriodDurations]) -> Dict[str, PeriodDurations]:
    return group_period_durations(daily, week_start_key)


def calculate_monthly_durations(daily: Mapping[str, PeriodDurations]) -> Dict[str, PeriodDurations]:
    return group_period_durations(daily, month_key)


def calculate_quarterly_durations(monthly: Mapping[str, PeriodDurations]) -> Dict[str, PeriodDurations]:
    return group_period_durations(monthly, quarter_key)


def calculate_yearly_durations(quarterly: Mapping[str, PeriodDurations]) -> Dict[str, PeriodDurations]:
    return group_period_durations(quarterly, year_key)


def aggregate(reports: Reports) -> Aggregates:
    daily = calculate_daily_durations(reports)
    monthly = calculate_monthly_durations(daily)
    quarterly = calculate_quarterly_durations(monthly)
    return Aggregates(
        daily=daily,
        weekly=calculate_weekly_durations(daily),
        monthly=monthly,
        quarterly=quarterly,
        yearly=calculate_yearly_durations(quarterly),
    )


def sorted_groups(groups: Mapping[str, GroupedDuration]) -> List[Tuple[str, GroupedDuration]]:
    """Groups ordered by project name, then by descending duration."""
    return sorted(groups.items(), key=lambda item: (item[1].project.casefold(), -item[1].duration))


def monthly_total(daily: Mapping[str, PeriodDurations], month: str) -> int:
    """Month total as shown in the calendar; days with negative entries are left out."""
    return sum(
        durations.total_duration
        for date_str, durations in daily.items()
        if month_key(date_str) == month and not durations.has_negative_duration
    )


def total_duration(durations: Iterable[PeriodDurations]) -> int:
    return sum(item.total_duration for item in durations)
