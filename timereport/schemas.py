from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from typing_extensions import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from .time_strings import calculate_duration


class TimeInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class ReportEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: TimeInterval
    duration: int
    project: Optional[str] = None
    activity: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def build(
        cls,
        start: str,
        end: str,
        project: Optional[str],
        activity: Optional[str] = None,
        description: Optional[str] = None,
    ) -> "ReportEntry":
        return cls(
            time=TimeInterval(start=start, end=end),
            duration=calculate_duration(start, end),
            project=project,
            activity=activity,
            description=description,
        )


class Issue(BaseModel):
    """A single problem found while parsing a report or validating a form."""

    path: str
    message: str
    code: str
    input: Any = None
    line: Optional[int] = None


class ParsedReport(BaseModel):
    kind: Literal["entries"] = "entries"
    entries: List[ReportEntry] = Field(default_factory=list)
    has_negative_duration: bool = False

    @property
    def issues(self) -> None:
        return None


class InvalidReport(BaseModel):
    kind: Literal["issues"] = "issues"
    issues: List[Issue]

    @property
    def entries(self) -> None:
        return None

    @property
    def has_negative_duration(self) -> bool:
        return False


DayReport = Annotated[Union[ParsedReport, InvalidReport], Field(discriminator="kind")]

Reports = Dict[str, Union[ParsedReport, InvalidReport]]


GroupType = Literal["project", "activity", "description"]


class GroupedDuration(BaseModel):
    type: GroupType
    project: str
    activity: Optional[str] = None
    description: Optional[str] = None
    duration: int = 0

    @model_serializer(mode="plain", when_used="json")
    def _serialize(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "project": self.project}
        if self.type == "activity":
            data["activity"] = self.activity
        if self.type == "description":
            data["description"] = self.description
        data["duration"] = self.duration
        return data


class PeriodDurations(BaseModel):
    total_duration: int = 0
    by_project: Dict[str, GroupedDuration] = Field(default_factory=dict)
    by_project_activity: Dict[str, GroupedDuration] = Field(default_factory=dict)
    by_project_description: Dict[str, GroupedDuration] = Field(default_factory=dict)
    has_negative_duration: bool = False
    has_issues: bool = False

    def groups(self, group_type: GroupType) -> Dict[str, GroupedDuration]:
        if group_type == "project":
            return self.by_project
        if group_type == "activity":
            return self.by_project_activity
        return self.by_project_description

    @model_serializer(mode="plain", when_used="json")
    def _serialize(self) -> dict[str, Any]:
        return {
            "totalDuration": self.total_duration,
            "byProject": {key: group._serialize() for key, group in self.by_project.items()},
            "byProjectActivity": {
                key: group._serialize() for key, group in self.by_project_activity.items()
            },
            "byProjectDescription": {
                key: group._serialize() for key, group in self.by_project_description.items()
            },
            "hasNegativeDuration": self.has_negative_duration,
            "hasIssues": self.has_issues,
        }


PeriodType = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]


class Aggregates(BaseModel):
    daily: Dict[str, PeriodDurations] = Field(default_factory=dict)
    weekly: Dict[str, PeriodDurations] = Field(default_factory=dict)
    monthly: Dict[str, PeriodDurations] = Field(default_factory=dict)
    quarterly: Dict[str, PeriodDurations] = Field(default_factory=dict)
    yearly: Dict[str, PeriodDurations] = Field(default_factory=dict)

    def period(self, period_type: PeriodType) -> Dict[str, PeriodDurations]:
        return getattr(self, period_type)


class EntryFormAccepted(BaseModel):
    ok: Literal[True] = True
    date: str
    entry_index: int
    entry: ReportEntry


class EntryFormRejected(BaseModel):
    ok: Literal[False] = False
    issues: List[Issue]
    values: Dict[str, Any] = Field(default_factory=dict)

    def flatten(self) -> Dict[str, List[str]]:
        """Messages grouped by field path, in the order they were raised."""
        flat: Dict[str, List[str]] = {}
        for issue in self.issues:
            flat.setdefault(issue.path, []).append(issue.message)
        return flat


EntryFormResult = Union[EntryFormAccepted, EntryFormRejected]
