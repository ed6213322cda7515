from __future__ import annotations

import datetime as dt

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ReportRecord(Base):
    """Raw text of one day's report, keyed by ``yyyyMMdd``."""

    __tablename__ = "reports"

    date = Column(String(8), primary_key=True)
    content = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
