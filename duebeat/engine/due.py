"""Due-date and daily-goal computation for a single reminder.

All functions are pure: they read a reminder's configuration, the timestamp
of its most recent entry and "now", and never touch storage or the clock.
Only the latest entry timestamp is consulted. For fixed-time reminders this
means one entry logged after the day's last slot covers every slot of that
day, including ones that were never logged.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from duebeat.models import FixedSchedule, IntervalSchedule, ReminderConfig, ReminderEntry
from duebeat.utils.constants import DEFAULT_TIMEZONE, DISTANT_FUTURE
from duebeat.utils.time_utils import at_offset, local_day_start, seconds_since_midnight, shift_days


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def _slot_times(schedule: FixedSchedule, now: datetime, tz: str) -> List[datetime]:
    """Today's slots as UTC instants, in time order."""
    today = local_day_start(now, tz)
    return [at_offset(today, seconds, tz) for seconds in sorted(schedule.times)]


def _is_covered(slot: datetime, last_entry: datetime | None) -> bool:
    """A slot is covered once any entry has been logged at or after it."""
    return last_entry is not None and last_entry >= slot


def _interval_baseline(config: ReminderConfig, last_entry: datetime | None) -> datetime:
    return last_entry if last_entry is not None else config.created_at


def is_goal_reached(
    config: ReminderConfig,
    last_entry: datetime | None,
    now: datetime,
    dnd_floor: datetime | None = None,
    *,
    today_count: int = 0,
    tz: str = DEFAULT_TIMEZONE,
) -> bool:
    """Check whether today's goal for a reminder is met.

    Interval reminders compare today's summed entry counts against the daily
    goal (no goal means never reached). Fixed reminders are done once no
    slot is still ahead today and every past slot is covered; a fixed
    reminder with no slots counts as reached. `dnd_floor` is accepted so all
    three calculators share one call shape; goals do not depend on it.
    """
    schedule = config.schedule

    if isinstance(schedule, IntervalSchedule):
        if not schedule.daily_goal or schedule.daily_goal <= 0:
            return False
        return today_count >= schedule.daily_goal

    if isinstance(schedule, FixedSchedule):
        for slot in _slot_times(schedule, now, tz):
            if slot > now:
                # Still a slot to come today
                return False
            if not _is_covered(slot, last_entry):
                return False
        return True

    raise TypeError(f"Unknown schedule: {schedule!r}")


def next_due_date(
    config: ReminderConfig,
    last_entry: datetime | None,
    now: datetime,
    dnd_floor: datetime | None = None,
    *,
    today_count: int = 0,
    tz: str = DEFAULT_TIMEZONE,
) -> datetime:
    """Compute when a reminder next becomes due.

    Fixed reminders return the earliest missed slot today, else the next
    upcoming slot today, else the first slot tomorrow. Interval reminders
    count from the later of the last entry (or creation) and the DND floor,
    optionally snapped to the clock-aligned grid.

    Returns:
        Due datetime (UTC); DISTANT_FUTURE when there is nothing to schedule
    """
    schedule = config.schedule

    if isinstance(schedule, FixedSchedule):
        slots = _slot_times(schedule, now, tz)
        missed = [slot for slot in slots if slot <= now and not _is_covered(slot, last_entry)]
        upcoming = [slot for slot in slots if slot > now]

        # Overdue slots win over future ones
        if missed:
            return missed[0]
        if upcoming:
            return upcoming[0]
        if not schedule.times:
            return DISTANT_FUTURE

        tomorrow = shift_days(local_day_start(now, tz), 1)
        return at_offset(tomorrow, min(schedule.times), tz)

    if isinstance(schedule, IntervalSchedule):
        base = _interval_baseline(config, last_entry)

        # DND only ever pushes the baseline forward
        if dnd_floor is not None and dnd_floor > base:
            base = dnd_floor

        if not schedule.align_to_clock:
            return base + timedelta(minutes=schedule.interval_minutes)

        interval = schedule.interval_minutes
        alignment = schedule.alignment_minute
        base_minutes = seconds_since_midnight(base, tz) // 60

        k = _ceil_div(base_minutes - alignment, interval)
        next_minutes = alignment + k * interval

        # The aligned slot has to be strictly after the base
        if next_minutes <= base_minutes:
            next_minutes += interval

        return at_offset(local_day_start(base, tz), next_minutes * 60, tz)

    raise TypeError(f"Unknown schedule: {schedule!r}")


def is_due(
    config: ReminderConfig,
    last_entry: datetime | None,
    now: datetime,
    dnd_floor: datetime | None = None,
    *,
    today_count: int = 0,
    tz: str = DEFAULT_TIMEZONE,
) -> bool:
    """Check if a reminder is due right now.

    A reminder whose goal is reached is never due. The DND floor does not
    take part here: suppression during DND is the sequencer's job.
    """
    if is_goal_reached(config, last_entry, now, dnd_floor, today_count=today_count, tz=tz):
        return False

    schedule = config.schedule

    if isinstance(schedule, IntervalSchedule):
        baseline = _interval_baseline(config, last_entry)

        if not schedule.align_to_clock:
            return now >= baseline + timedelta(minutes=schedule.interval_minutes)

        interval = schedule.interval_minutes
        alignment = schedule.alignment_minute
        current_minutes = seconds_since_midnight(now, tz) // 60

        k = (current_minutes - alignment) // interval
        last_aligned = at_offset(local_day_start(now, tz), (alignment + k * interval) * 60, tz)

        return baseline < last_aligned <= now and last_aligned >= config.created_at

    if isinstance(schedule, FixedSchedule):
        return any(
            slot <= now and not _is_covered(slot, last_entry)
            for slot in _slot_times(schedule, now, tz)
        )

    raise TypeError(f"Unknown schedule: {schedule!r}")


def last_entry_time(entries: Iterable[ReminderEntry]) -> datetime | None:
    """Latest entry timestamp; skipped entries count too."""
    return max((entry.timestamp for entry in entries), default=None)


def today_count(
    entries: Iterable[ReminderEntry], now: datetime, tz: str = DEFAULT_TIMEZONE
) -> int:
    """Sum of entry counts logged since local midnight."""
    today = at_offset(local_day_start(now, tz), 0, tz)
    return sum(entry.count for entry in entries if entry.timestamp >= today)


def daily_progress(config: ReminderConfig, count: int) -> float:
    """Fraction of the daily goal achieved; 0 when there is no goal."""
    goal = config.effective_daily_goal
    if goal <= 0:
        return 0.0
    return count / goal
