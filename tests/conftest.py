from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.orm import sessionmaker

from timereport.database import create_session_factory, create_sqlite_engine
from timereport.storage import DirectoryStorage, SqlStorage


@pytest.fixture(scope="session")
def temp_db_path() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "test.db"
        yield path


@pytest.fixture(scope="session")
def engine(temp_db_path: Path):
    engine = create_sqlite_engine(temp_db_path)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> Generator[sessionmaker, None, None]:
    factory = create_session_factory(engine)
    yield factory
    with engine.begin() as connection:
        connection.exec_driver_sql("DELETE FROM reports")


@pytest.fixture(scope="function")
def sql_storage(session_factory: sessionmaker) -> SqlStorage:
    return SqlStorage(session_factory)


@pytest.fixture(scope="function")
def directory_storage(tmp_path: Path) -> DirectoryStorage:
    return DirectoryStorage(tmp_path / "reports")


@pytest.fixture()
def sample_day() -> str:
    return "20240108"


@pytest.fixture()
def sample_text() -> str:
    return "09:00 - ProjA - did X\n10:00 - \n10:15 - ProjA - did Y\n10:45 - \n"
