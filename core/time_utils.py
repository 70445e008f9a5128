# core/time_utils.py
import calendar
from datetime import date, datetime, time, timezone
from typing import Union

import pytz

DateLike = Union[date, str]


def get_tz(name: str):
    return pytz.timezone(name)

def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def now_in(tz) -> datetime:
    return datetime.now(tz)

def ensure_aware(dt: datetime, tz) -> datetime:
    """Naive datetimes are read as wall-clock time in `tz`."""
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt

def to_utc_naive(dt: datetime, tz) -> datetime:
    """Return UTC-naive datetime for Mongo 'date' type."""
    return ensure_aware(dt, tz).astimezone(timezone.utc).replace(tzinfo=None)

def to_local(dt: datetime, tz) -> datetime:
    """Make any Mongo datetime (usually UTC-naive) aware in `tz`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)

def local_today(now: datetime, tz) -> date:
    return ensure_aware(now, tz).astimezone(tz).date()

def local_midnight(d: date, tz) -> datetime:
    return tz.localize(datetime.combine(d, time.min))

def month_start(now: datetime, tz) -> date:
    return local_today(now, tz).replace(day=1)

def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]

def days_elapsed_in_month(now: datetime, tz) -> int:
    return local_today(now, tz).day

def parse_date(d: DateLike) -> date:
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    return date.fromisoformat(str(d))
