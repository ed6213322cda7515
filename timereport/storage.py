from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from typing_extensions import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import Settings, settings
from .database import create_session_factory, create_sqlite_engine, db_session
from .date_strings import is_valid_date_string
from .models import ReportRecord

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_PREFIX = "timereport - "
NEW_FILE_MODE = 0o644


class StorageError(RuntimeError):
    """Reading or writing raw report text failed."""

    def __init__(self, message: str, *, date_str: Optional[str] = None) -> None:
        super().__init__(message)
        self.date_str = date_str


class ReportStorage(Protocol):
    def read_raw_text(self, date_str: str) -> Optional[str]:
        ...

    def read_raw_text_range(self, start: str, end: str) -> Dict[str, str]:
        ...

    def write_raw_text(self, date_str: str, text: str) -> None:
        ...


class DirectoryStorage:
    """One plain-text file per day, named ``<prefix><yyyyMMdd>``.

    Files may live anywhere below ``root``; new days are written to ``root``.
    """

    def __init__(self, root: Path, prefix: str = DEFAULT_FILENAME_PREFIX) -> None:
        self.root = Path(root)
        self.prefix = prefix

    def _filename(self, date_str: str) -> str:
        return f"{self.prefix}{date_str}"

    def _iter_report_files(self) -> Iterator[Tuple[str, Path]]:
        if not self.root.is_dir():
            return
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or not path.name.startswith(self.prefix):
                continue
            date_str = path.name[len(self.prefix):]
            if is_valid_date_string(date_str):
                yield date_str, path

    def _find(self, date_str: str) -> Optional[Path]:
        direct = self.root / self._filename(date_str)
        if direct.is_file():
            return direct
        for found_date, path in self._iter_report_files():
            if found_date == date_str:
                return path
        return None

    def _read(self, path: Path, date_str: str) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.exception("Failed to read report %s", path)
            raise StorageError(f"Report {date_str} could not be read", date_str=date_str) from exc

    def read_raw_text(self, date_str: str) -> Optional[str]:
        path = self._find(date_str)
        if path is None:
            return None
        return self._read(path, date_str)

    def read_raw_text_range(self, start: str, end: str) -> Dict[str, str]:
        texts: Dict[str, str] = {}
        for date_str, path in self._iter_report_files():
            if not start <= date_str <= end:
                continue
            if date_str in texts:
                logger.warning("Ignoring duplicate report file %s", path)
                continue
            texts[date_str] = self._read(path, date_str)
        return texts

    def write_raw_text(self, date_str: str, text: str) -> None:
        target = self._find(date_str) or self.root / self._filename(date_str)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                    handle.write(text)
                if target.exists():
                    shutil.copymode(target, tmp_name)
                else:
                    os.chmod(tmp_name, NEW_FILE_MODE)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.exception("Failed to write report %s", target)
            raise StorageError(f"Report {date_str} could not be written", date_str=date_str) from exc
        logger.info("Wrote report %s", target)


class SqlStorage:
    """Raw report texts kept in the ``reports`` table."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def read_raw_text(self, date_str: str) -> Optional[str]:
        try:
            with db_session(self.session_factory) as session:
                record = session.get(ReportRecord, date_str)
                return record.content if record else None
        except SQLAlchemyError as exc:
            logger.exception("Failed to read report %s", date_str)
            raise StorageError(f"Report {date_str} could not be read", date_str=date_str) from exc

    def read_raw_text_range(self, start: str, end: str) -> Dict[str, str]:
        try:
            with db_session(self.session_factory) as session:
                records = (
                    session.query(ReportRecord)
                    .filter(ReportRecord.date >= start, ReportRecord.date <= end)
                    .order_by(ReportRecord.date)
                    .all()
                )
                return {record.date: record.content for record in records}
        except SQLAlchemyError as exc:
            logger.exception("Failed to read reports %s-%s", start, end)
            raise StorageError(f"Reports {start}-{end} could not be read") from exc

    def write_raw_text(self, date_str: str, text: str) -> None:
        try:
            with db_session(self.session_factory) as session:
                record = session.get(ReportRecord, date_str)
                if record:
                    record.content = text
                else:
                    session.add(ReportRecord(date=date_str, content=text))
        except SQLAlchemyError as exc:
            logger.exception("Failed to write report %s", date_str)
            raise StorageError(f"Report {date_str} could not be written", date_str=date_str) from exc
        logger.info("Stored report %s", date_str)


def build_storage(config: Settings = settings) -> ReportStorage:
    if config.storage_backend == "sqlite":
        engine = create_sqlite_engine(config.sqlite_path)
        return SqlStorage(create_session_factory(engine))
    return DirectoryStorage(config.reports_dir, prefix=config.filename_prefix)
