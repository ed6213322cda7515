from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .date_strings import is_valid_date_string
from .schemas import EntryFormAccepted, EntryFormRejected, EntryFormResult, Issue, ReportEntry
from .time_strings import calculate_duration, is_valid_time

PROJECT_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
ENTRY_INDEX_PATTERN = re.compile(r"^\d+$")
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

PROJECT_MAX_LENGTH = 32
ACTIVITY_MAX_LENGTH = 32
DESCRIPTION_MAX_LENGTH = 256


class TimeRange(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _validate_format(cls, value: str) -> str:
        if not is_valid_time(value):
            raise PydanticCustomError("time_format", "Invalid time format (expected HH:mm)")
        return value

    # Only runs once both times are well formed.
    @model_validator(mode="after")
    def _validate_order(self) -> "TimeRange":
        if calculate_duration(self.start, self.end) <= 0:
            raise PydanticCustomError("time_order", "End time must be after start time")
        return self


class EntryForm(BaseModel):
    """A submitted add/edit entry form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    time: TimeRange
    project: str = Field(min_length=1, max_length=PROJECT_MAX_LENGTH)
    activity: Optional[str] = Field(default=None, max_length=ACTIVITY_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    date: str
    entry_index: int

    @field_validator("project")
    @classmethod
    def _validate_project(cls, value: str) -> str:
        if not PROJECT_PATTERN.match(value):
            raise PydanticCustomError("project_format", "Project may only contain letters and digits")
        return value

    @field_validator("activity", "description")
    @classmethod
    def _validate_single_line(cls, value: Optional[str]) -> Optional[str]:
        if value and CONTROL_CHARACTERS.search(value):
            raise PydanticCustomError("line_break", "Must fit on a single line")
        return value

    @field_validator("activity")
    @classmethod
    def _empty_activity(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        if not is_valid_date_string(value):
            raise PydanticCustomError("date_format", "Invalid date format (expected yyyyMMdd)")
        return value

    @field_validator("entry_index", mode="before")
    @classmethod
    def _coerce_entry_index(cls, value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        if isinstance(value, str) and ENTRY_INDEX_PATTERN.match(value):
            return int(value)
        raise PydanticCustomError("entry_index_format", "Entry index must be a string with a number")

    def to_entry(self) -> ReportEntry:
        return ReportEntry.build(
            self.time.start,
            self.time.end,
            self.project,
            self.activity,
            self.description,
        )


def _drop_missing(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def form_values(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize flat form data (``start``, ``entryIndex``...) into the form shape."""
    time = fields.get("time")
    if not isinstance(time, Mapping):
        time = {"start": fields.get("start"), "end": fields.get("end")}
    entry_index = fields.get("entry_index")
    if entry_index is None:
        entry_index = fields.get("entryIndex")
    return _drop_missing(
        {
            "time": _drop_missing(time),
            "project": fields.get("project"),
            "activity": fields.get("activity"),
            "description": fields.get("description"),
            "date": fields.get("date"),
            "entry_index": entry_index,
        }
    )


def _issue_path(detail: Mapping[str, Any]) -> str:
    if detail["type"] == "time_order":
        return "time.end"
    return ".".join(str(part) for part in detail["loc"])


def issues_from_validation_error(error: ValidationError) -> List[Issue]:
    return [
        Issue(
            path=_issue_path(detail),
            message=detail["msg"],
            code=detail["type"],
            input=detail.get("input"),
        )
        for detail in error.errors(include_url=False)
    ]


def validate_entry_form(fields: Mapping[str, Any]) -> EntryFormResult:
    """Validate an entry form submission.

    Every failing field is reported; the submitted values are returned with
    the issues so the form can be shown again.
    """
    values = form_values(fields)
    try:
        form = EntryForm.model_validate(values)
    except ValidationError as exc:
        return EntryFormRejected(issues=issues_from_validation_error(exc), values=values)
    return EntryFormAccepted(date=form.date, entry_index=form.entry_index, entry=form.to_entry())


def find_issue_by_path(issues: Optional[Iterable[Issue]], path: str) -> Optional[Issue]:
    for issue in issues or ():
        if issue.path == path:
            return issue
    return None
