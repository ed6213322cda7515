from __future__ import annotations

from timereport.parser import parse_report
from timereport.schemas import ReportEntry
from timereport.serializer import serialize_report


def test_contiguous_entries_share_timestamp_line() -> None:
    entries = [
        ReportEntry.build("09:00", "10:00", "ProjA", description="did X"),
        ReportEntry.build("10:00", "11:30", "ProjA", "dev", "did Y"),
    ]

    assert serialize_report(entries) == (
        "09:00 - ProjA - did X\n"
        "10:00 - ProjA - dev - did Y\n"
        "11:30 - \n"
    )


def test_gap_gets_boundary_line(sample_text: str) -> None:
    entries = [
        ReportEntry.build("09:00", "10:00", "ProjA", description="did X"),
        ReportEntry.build("10:15", "10:45", "ProjA", description="did Y"),
    ]

    assert serialize_report(entries) == sample_text


def test_entries_are_written_in_chronological_order() -> None:
    entries = [
        ReportEntry.build("13:00", "14:00", "ProjB", description="after lunch"),
        ReportEntry.build("08:30", "12:00", "ProjA", description="morning"),
    ]

    assert serialize_report(entries).splitlines() == [
        "08:30 - ProjA - morning",
        "12:00 - ",
        "13:00 - ProjB - after lunch",
        "14:00 - ",
    ]


def test_entries_without_description_are_skipped() -> None:
    entries = [
        ReportEntry.build("09:00", "10:00", "ProjA", "dev", None),
        ReportEntry.build("10:00", "11:00", "ProjA", description=""),
        ReportEntry.build("11:00", "12:00", "ProjA", description="kept"),
    ]

    assert serialize_report(entries) == "11:00 - ProjA - kept\n12:00 - \n"


def test_empty_entry_list() -> None:
    assert serialize_report([]) == ""


def test_serialized_text_parses_back_to_same_entries() -> None:
    entries = [
        ReportEntry.build("07:45", "09:00", "ProjA", "ops", "deploy - second try"),
        ReportEntry.build("09:00", "09:30", "ProjB", description="standup"),
        ReportEntry.build("10:00", "12:15", "ProjA", description="review"),
    ]

    assert parse_report(serialize_report(entries)).entries == entries


def test_existing_file_survives_parse_and_serialize(sample_text: str) -> None:
    assert serialize_report(parse_report(sample_text).entries) == sample_text
