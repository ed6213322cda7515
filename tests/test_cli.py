from __future__ import annotations

import json

import pytest

from timereport import __main__ as cli
from timereport.storage import DirectoryStorage


@pytest.fixture()
def storage(monkeypatch, directory_storage: DirectoryStorage) -> DirectoryStorage:
    monkeypatch.setattr(cli, "build_storage", lambda config: directory_storage)
    return directory_storage


def test_show_prints_entries(storage: DirectoryStorage, sample_text: str, capsys) -> None:
    storage.write_raw_text("20240108", "09:00 - ProjA - dev - did X\n10:00 - \n10:15 - ProjA - did Y\n10:45 - \n")

    assert cli.main(["show", "20240108"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("09:00-10:00")
    assert out[0].endswith("ProjA / dev / did X")
    assert "30m" in out[1]


def test_show_reports_issues(storage: DirectoryStorage, capsys) -> None:
    storage.write_raw_text("20240108", "09:00 - ProjA - a\n1000 - \n")

    assert cli.main(["show", "20240108"]) == 1

    assert "line 2" in capsys.readouterr().out


def test_show_empty_day(storage: DirectoryStorage, capsys) -> None:
    assert cli.main(["show", "20240108"]) == 0
    assert capsys.readouterr().out.strip() == "No entries"


def test_summary_text(storage: DirectoryStorage, sample_text: str, capsys) -> None:
    storage.write_raw_text("20240108", sample_text)
    storage.write_raw_text("20240109", "09:00 - ProjB - support\n09:45 - \n")

    assert cli.main(["summary", "--from", "20240101", "--to", "20240131", "--period", "weekly"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "20240108  2h 15m"
    assert out[1].split() == ["ProjA", "1h", "30m"]
    assert out[2].split() == ["ProjB", "45m"]
    assert out[-1] == "Total  2h 15m"


def test_summary_json(storage: DirectoryStorage, sample_text: str, capsys) -> None:
    storage.write_raw_text("20240108", sample_text)

    assert cli.main(["summary", "--from", "20240101", "--to", "20240131", "--period", "monthly", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["202401"]["totalDuration"] == 90
    assert payload["202401"]["byProject"]["ProjA"]["duration"] == 90


def test_summary_rejects_reversed_range(storage: DirectoryStorage) -> None:
    assert cli.main(["summary", "--from", "20240131", "--to", "20240101"]) == 2


def test_invalid_date_argument_exits() -> None:
    with pytest.raises(SystemExit):
        cli.main(["show", "2024-01-08"])
