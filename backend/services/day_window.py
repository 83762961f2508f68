"""
OGCS CRM - Civil day windows

A "day" is always read at the fixed offset configured by
DAY_UTC_OFFSET_MINUTES (default UTC+5:30), never at the server or client
timezone.
"""

import re
from datetime import datetime, timedelta, timezone, date as date_cls
from typing import Tuple

from config import day_timezone

YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_ymd(value: str) -> date_cls:
    """Parse YYYY-MM-DD. Raises ValueError on malformed or impossible dates."""
    if not value or not YMD_RE.match(value):
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def day_window(date_ymd: str, offset_minutes: int = None) -> Tuple[datetime, datetime]:
    """
    Inclusive [00:00:00.000, 23:59:59.999] of the civil day, as UTC datetimes.
    day_window("2024-03-01") at +330 -> (2024-02-29 18:30Z, 2024-03-01 18:29:59.999Z)
    """
    day = parse_ymd(date_ymd)
    tz = day_timezone(offset_minutes)
    start = datetime(day.year, day.month, day.day, tzinfo=tz)
    end = start + timedelta(days=1) - timedelta(milliseconds=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_date_of(moment: datetime, offset_minutes: int = None) -> str:
    """Calendar date (YYYY-MM-DD) of a timestamp at the configured offset"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(day_timezone(offset_minutes)).strftime("%Y-%m-%d")


def as_utc(moment: datetime) -> datetime:
    """Driver datetimes come back naive; they are UTC"""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_storage(moment: datetime) -> datetime:
    """Naive UTC datetime, the form BSON dates are written and compared in"""
    moment = as_utc(moment)
    return moment.replace(tzinfo=None, microsecond=(moment.microsecond // 1000) * 1000)
