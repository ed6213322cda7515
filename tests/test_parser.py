from __future__ import annotations

from timereport.parser import parse_day, parse_report, parse_reports
from timereport.schemas import InvalidReport, ParsedReport, ReportEntry


def test_boundary_line_only_supplies_end_time(sample_text: str) -> None:
    report = parse_report(sample_text)

    assert isinstance(report, ParsedReport)
    assert report.issues is None
    assert report.has_negative_duration is False
    assert report.entries == [
        ReportEntry.build("09:00", "10:00", "ProjA", description="did X"),
        ReportEntry.build("10:15", "10:45", "ProjA", description="did Y"),
    ]
    assert [entry.duration for entry in report.entries] == [60, 30]


def test_activity_and_description_fields() -> None:
    text = "09:00 - ProjA - dev - write parser - part 2\n10:00 - ProjB - review\n11:00 - "
    report = parse_report(text)

    first, second = report.entries
    assert first.project == "ProjA"
    assert first.activity == "dev"
    assert first.description == "write parser - part 2"
    assert second.activity is None
    assert second.description == "review"


def test_negative_duration_is_flagged_but_kept() -> None:
    report = parse_report("10:00 - ProjA - late fix\n09:00 - ")

    assert isinstance(report, ParsedReport)
    assert report.has_negative_duration is True
    assert len(report.entries) == 1
    assert report.entries[0].duration == -60


def test_malformed_start_aborts_day() -> None:
    report = parse_report("9:00 - ProjA - did X\n10:00 - \n")

    assert isinstance(report, InvalidReport)
    assert report.entries is None
    assert report.has_negative_duration is False
    assert len(report.issues) == 1
    issue = report.issues[0]
    assert issue.path == "start"
    assert issue.code == "time_format"
    assert issue.input == "9:00"
    assert issue.line == 1


def test_malformed_end_reports_file_line_number() -> None:
    text = "08:00 - ProjA - ok\n09:00 - ProjA - did X\n\n1000 - \n"
    report = parse_report(text)

    assert isinstance(report, InvalidReport)
    assert [(issue.path, issue.line) for issue in report.issues] == [("end", 4)]


def test_malformed_time_discards_earlier_entries() -> None:
    report = parse_report("08:00 - ProjA - ok\n09:00 - ProjA - fine\n25:00 - \n")

    assert isinstance(report, InvalidReport)


def test_empty_and_single_line_days() -> None:
    for text in ["", "\n\n", "09:00 - ProjA - alone"]:
        report = parse_report(text)
        assert isinstance(report, ParsedReport)
        assert report.entries == []


def test_incomplete_entries_are_dropped_but_consume_their_line() -> None:
    text = "09:00 - ProjA\n10:00 - ProjA - done\n11:00 - \n12:00 -  - missing project\n13:00"
    report = parse_report(text)

    assert report.entries == [ReportEntry.build("10:00", "11:00", "ProjA", description="done")]


def test_windows_line_endings() -> None:
    report = parse_report("09:00 - ProjA - did X\r\n10:00 - \r\n")

    assert report.entries == [ReportEntry.build("09:00", "10:00", "ProjA", description="did X")]


def test_parse_day_treats_missing_text_as_empty() -> None:
    report = parse_day(None)

    assert isinstance(report, ParsedReport)
    assert report.entries == []


def test_parse_reports_keeps_date_keys(sample_text: str) -> None:
    reports = parse_reports({"20240108": sample_text, "20240109": "x - ProjA - y\n10:00"})

    assert isinstance(reports["20240108"], ParsedReport)
    assert isinstance(reports["20240109"], InvalidReport)
