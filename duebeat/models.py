"""Data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Tuple

from duebeat.config import Config
from duebeat.utils.constants import FIXED_TIME_MIN_GAP_SECONDS
from duebeat.utils.time_utils import format_hhmm, parse_hhmm

ReminderKind = Literal["interval", "fixed"]
OverlayAction = Literal["open", "advance", "close"]


@dataclass(frozen=True)
class IntervalSchedule:
    """Recurs a fixed number of minutes after the last entry."""

    interval_minutes: int
    daily_goal: int | None = None
    align_to_clock: bool = False
    alignment_minute: int = 0  # Minute-of-day offset of aligned slots


@dataclass(frozen=True)
class FixedSchedule:
    """Recurs at specific times of day."""

    times: Tuple[float, ...] = ()  # Seconds from local midnight


Schedule = IntervalSchedule | FixedSchedule


@dataclass(frozen=True)
class ReminderConfig:
    """Static configuration of a tracked habit."""

    id: str
    name: str
    schedule: Schedule
    created_at: datetime  # UTC
    is_archived: bool = False

    @property
    def kind(self) -> ReminderKind:
        return "fixed" if isinstance(self.schedule, FixedSchedule) else "interval"

    @property
    def effective_daily_goal(self) -> int:
        """Goal used for progress: slot count for fixed, daily_goal for interval."""
        if isinstance(self.schedule, FixedSchedule):
            return len(self.schedule.times)
        return self.schedule.daily_goal or 0


@dataclass
class ReminderEntry:
    """A single completion or skip logged for a reminder."""

    timestamp: datetime  # UTC
    count: int
    is_skipped: bool = False
    duration_seconds: float | None = None  # Overlay shown -> completion


@dataclass(frozen=True)
class DNDWindow:
    """Daily do-not-disturb window, offsets in seconds from local midnight."""

    enabled: bool = False
    start_seconds: float = 0
    end_seconds: float = 0

    @classmethod
    def from_hhmm(cls, start: str, end: str, enabled: bool = True) -> "DNDWindow":
        """Build a window from HH:MM strings (24-hour)."""
        return cls(enabled=enabled, start_seconds=parse_hhmm(start), end_seconds=parse_hhmm(end))

    @property
    def spans_midnight(self) -> bool:
        return self.start_seconds >= self.end_seconds

    def __str__(self) -> str:
        if not self.enabled:
            return "off"
        return f"{format_hhmm(self.start_seconds)}-{format_hhmm(self.end_seconds)}"


@dataclass
class Profile:
    """A set of reminders sharing one DND window and local calendar."""

    id: str
    name: str
    timezone: str = field(default_factory=lambda: Config.TIMEZONE)
    dnd: DNDWindow = field(default_factory=DNDWindow)


@dataclass(frozen=True)
class ReminderSnapshot:
    """What the scheduler needs from storage for one reminder on one tick."""

    config: ReminderConfig
    last_entry: datetime | None = None  # Latest entry timestamp, skips included
    today_count: int = 0  # Sum of entry counts since local midnight


@dataclass
class SequencerState:
    """Transient notification bookkeeping owned by the Sequencer."""

    notified_ids: set[str] = field(default_factory=set)
    active_reminder_id: str | None = None
    overlay_open: bool = False
    overlay_opened_at: datetime | None = None
    snooze_until: datetime | None = None


@dataclass(frozen=True)
class OverlayEvent:
    """Overlay state change for the presentation layer."""

    action: OverlayAction
    reminder_id: str | None
    at: datetime


def add_fixed_time(times: Tuple[float, ...], seconds: float) -> Tuple[float, ...]:
    """Insert a slot unless one already exists within a minute of it.

    Returns the slots sorted, which is what the calculators expect.
    """
    if any(abs(existing - seconds) < FIXED_TIME_MIN_GAP_SECONDS for existing in times):
        return tuple(sorted(times))
    return tuple(sorted((*times, seconds)))


def remove_fixed_time(times: Tuple[float, ...], seconds: float) -> Tuple[float, ...]:
    """Remove one exact slot if present."""
    remaining = list(times)
    if seconds in remaining:
        remaining.remove(seconds)
    return tuple(remaining)
