"""Time and local-calendar utilities."""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta


def to_utc(dt: datetime, tz: str) -> datetime:
    """Convert a timezone-aware datetime to UTC."""
    if dt.tzinfo is None:
        # Assume it's in the given timezone
        dt = dt.replace(tzinfo=ZoneInfo(tz))
    return dt.astimezone(ZoneInfo("UTC"))


def from_utc(dt: datetime, tz: str) -> datetime:
    """Convert a UTC datetime to the given timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(ZoneInfo(tz))


def local_day_start(dt: datetime, tz: str) -> datetime:
    """Local midnight of the day containing dt, as an aware local datetime."""
    local_dt = from_utc(dt, tz)
    return local_dt.replace(hour=0, minute=0, second=0, microsecond=0)


def seconds_since_midnight(dt: datetime, tz: str) -> int:
    """Whole seconds elapsed since local midnight."""
    local_dt = from_utc(dt, tz)
    return local_dt.hour * 3600 + local_dt.minute * 60 + local_dt.second


def at_offset(day_start: datetime, seconds: float, tz: str) -> datetime:
    """Instant (UTC) lying `seconds` of wall-clock time after a local midnight.

    Offsets past 86400 or below 0 roll into the next/previous day.
    """
    return to_utc(day_start + timedelta(seconds=seconds), tz)


def shift_days(day_start: datetime, days: int) -> datetime:
    """Move a local midnight by whole calendar days."""
    return day_start + relativedelta(days=days)


def parse_hhmm(value: str) -> int:
    """Convert an HH:MM string into seconds from midnight."""
    parsed = time.fromisoformat(value)
    return parsed.hour * 3600 + parsed.minute * 60 + parsed.second


def format_hhmm(seconds: float) -> str:
    """Format seconds from midnight as HH:MM."""
    total = int(seconds)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}"


def format_short_time(seconds: float) -> str:
    """Compact countdown label.

    Examples:
        30 -> "30s"
        300 -> "5m"
        3900 -> "1h 5m"
    """
    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m"
    return f"{secs}s"
