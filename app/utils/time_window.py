# ============================================================================
# app/utils/time_window.py
# Pure time helpers shared by the availability scanner and booking committer
# ============================================================================
"""
Salon-local time arithmetic.

All instants leaving this module are timezone-aware UTC datetimes. Local
calendar dates and clock times are always interpreted in the salon's
timezone, including its DST transitions.
"""
import re
from datetime import date, datetime, time, timedelta
from typing import Tuple, Union

import pytz

from app.core.errors import FormatError

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

DateLike = Union[str, date]
TimeLike = Union[str, time]


def get_timezone(name: str):
    """Resolve an IANA timezone name"""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise FormatError("timezone", f"unknown timezone {name!r}")


def parse_date(value: DateLike, field: str = "date") -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise FormatError(field)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise FormatError(field)


def parse_time_of_day(value: TimeLike, field: str = "time") -> time:
    """Parse an HH:MM (or HH:MM:SS) local clock time."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise FormatError(field)
    match = TIME_RE.match(value.strip())
    if not match:
        raise FormatError(field)
    hour, minute, second = int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise FormatError(field)
    return time(hour, minute, second)


def localize(naive: datetime, tz) -> datetime:
    """
    Attach a pytz timezone to a naive local datetime.

    Nonexistent local times (spring-forward gap) are pushed forward by the
    gap; ambiguous ones (fall-back) resolve to the first, DST occurrence.
    """
    try:
        return tz.localize(naive, is_dst=None)
    except pytz.exceptions.AmbiguousTimeError:
        return tz.localize(naive, is_dst=True)
    except pytz.exceptions.NonExistentTimeError:
        return tz.normalize(tz.localize(naive, is_dst=False))


def time_of_day_to_instant(date_iso: DateLike, hhmm: TimeLike, timezone: str) -> datetime:
    """Resolve a local date + local clock time into an absolute UTC instant."""
    local_date = parse_date(date_iso)
    local_time = parse_time_of_day(hhmm)
    tz = get_timezone(timezone)
    return localize(datetime.combine(local_date, local_time), tz).astimezone(pytz.UTC)


def add_minutes(instant: datetime, minutes: int) -> datetime:
    return instant + timedelta(minutes=minutes)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test; touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values read back from storage are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


def parse_instant(value: Union[str, datetime], timezone: str, field: str = "starts_at") -> datetime:
    """
    Parse an ISO-8601 instant.

    A trailing ``Z`` is accepted. Values without an offset are read as salon
    local time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise FormatError(field)
    else:
        raise FormatError(field)

    if parsed.tzinfo is None:
        parsed = localize(parsed, get_timezone(timezone))
    return parsed.astimezone(pytz.UTC)


def local_weekday(local_date: date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday"""
    return (local_date.weekday() + 1) % 7


def to_local(instant: datetime, timezone: str) -> datetime:
    return ensure_utc(instant).astimezone(get_timezone(timezone))


def local_date_of(instant: datetime, timezone: str) -> date:
    return to_local(instant, timezone).date()


def local_day_bounds(local_date: DateLike, timezone: str) -> Tuple[datetime, datetime]:
    """Half-open [start, end) of a salon-local calendar day as UTC instants."""
    day = parse_date(local_date)
    start = time_of_day_to_instant(day, time(0, 0), timezone)
    end = time_of_day_to_instant(day + timedelta(days=1), time(0, 0), timezone)
    return start, end
