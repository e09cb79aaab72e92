"""Single place where instants are turned into tenant calendar days and clocks.

Attendance events store a true UTC timestamp (``created_at``) plus two
display-level strings derived from it once, at write time: the tenant-local
calendar day (``YYYY-MM-DD``) and a 12-hour wall-clock time. Every component
derives those strings through the helpers below.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo

_CLOCK_FORMATS = ("%I:%M:%S %p", "%I:%M %p", "%H:%M:%S", "%H:%M")
_DAY_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%d %b %Y", "%b %d, %Y")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


@lru_cache(maxsize=None)
def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes coming back from MySQL are UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_local(moment: datetime, tz: str) -> datetime:
    return as_utc(moment).astimezone(get_zone(tz))


def local_day_key(moment: datetime, tz: str) -> str:
    return to_local(moment, tz).strftime("%Y-%m-%d")


def local_month(moment: datetime, tz: str) -> tuple[int, int]:
    local = to_local(moment, tz)
    return local.year, local.month


def format_clock(value: Union[datetime, time]) -> str:
    """12-hour wall clock, e.g. ``07:00:00 PM``."""
    return value.strftime("%I:%M:%S %p")


def local_clock(moment: datetime, tz: str) -> str:
    return format_clock(to_local(moment, tz))


def parse_clock_seconds(value: str) -> int:
    """Seconds since midnight for a stored wall-clock string."""
    text = str(value or "").replace("\u202f", " ").replace("\xa0", " ").strip().upper()
    for fmt in _CLOCK_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.hour * 3600 + parsed.minute * 60 + parsed.second
    raise ValueError(f"Invalid clock time: {value!r}")


def normalize_day_key(value) -> Optional[str]:
    """Canonical ``YYYY-MM-DD`` for the day formats found in stored events.

    Returns None when the value cannot be read as a calendar day.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    for fmt in _DAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    # ISO timestamps such as 2025-03-05T00:00:00.000Z
    if len(text) > 10 and text[10] in ("T", " "):
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d").date().isoformat()
        except ValueError:
            return None
    return None


def month_key(year: int, month: int) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    first = date(year, month, 1)
    if month == 12:
        return first, date(year + 1, 1, 1)
    return first, date(year, month + 1, 1)


def format_duration(seconds: int) -> str:
    total = max(int(seconds), 0)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"
