"""Tests for due-date and goal computation."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from duebeat.engine.due import (
    daily_progress,
    is_due,
    is_goal_reached,
    last_entry_time,
    next_due_date,
    today_count,
)
from duebeat.models import FixedSchedule, IntervalSchedule, ReminderConfig, ReminderEntry
from duebeat.utils.constants import DISTANT_FUTURE

UTC = ZoneInfo("UTC")


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=UTC)


def interval_reminder(created_at: datetime, **kwargs) -> ReminderConfig:
    kwargs.setdefault("interval_minutes", 60)
    return ReminderConfig("water", "Drink water", IntervalSchedule(**kwargs), created_at)


def fixed_reminder(*times: float) -> ReminderConfig:
    return ReminderConfig("pills", "Take pills", FixedSchedule(times), at(0, day=1))


# Interval reminders


def test_interval_first_due_from_creation():
    """Test a fresh interval reminder is due one interval after creation."""
    t0 = at(10)
    reminder = interval_reminder(t0, daily_goal=5)

    assert next_due_date(reminder, None, t0) == t0 + timedelta(seconds=3600)
    assert not is_due(reminder, None, t0 + timedelta(seconds=3599))
    assert is_due(reminder, None, t0 + timedelta(seconds=3600))


def test_interval_counts_from_last_entry():
    """Test the last entry replaces creation as the baseline."""
    reminder = interval_reminder(at(6), interval_minutes=45)
    last = at(9, 10)

    assert next_due_date(reminder, last, at(9, 30)) == at(9, 55)
    assert not is_due(reminder, last, at(9, 54))
    assert is_due(reminder, last, at(9, 55))


def test_interval_dnd_floor_only_pushes_forward():
    """Test the DND end replaces the baseline only when it is later."""
    reminder = interval_reminder(at(6))
    last = at(7)

    assert next_due_date(reminder, last, at(8, 30), at(8)) == at(9)
    assert next_due_date(reminder, last, at(8, 30), at(6, 30)) == at(8)


def test_interval_non_aligned_is_exactly_one_interval():
    """Test next due is exactly one interval past the effective baseline."""
    reminder = interval_reminder(at(0, day=1), interval_minutes=25)

    for last, floor in [(at(8, 3), None), (at(8, 3), at(9)), (None, at(7, 59))]:
        baseline = max(b for b in (last or reminder.created_at, floor) if b is not None)
        due = next_due_date(reminder, last, at(12), floor)
        assert due - baseline == timedelta(minutes=25)


def test_interval_aligned_next_slot():
    """Test aligned reminders snap to alignment + k * interval."""
    reminder = interval_reminder(at(0, day=1), interval_minutes=30, align_to_clock=True, alignment_minute=15)

    assert next_due_date(reminder, at(10, 20), at(10, 30)) == at(10, 45)
    # Landing exactly on a slot moves to the next one
    assert next_due_date(reminder, at(10, 15), at(10, 30)) == at(10, 45)


def test_interval_aligned_is_strictly_later_and_on_grid():
    """Test the aligned minute is after the baseline and congruent to the alignment."""
    reminder = interval_reminder(at(0, day=1), interval_minutes=40, align_to_clock=True, alignment_minute=7)

    for last in [at(0), at(0, 7), at(6, 59), at(13, 47), at(22, 30)]:
        due = next_due_date(reminder, last, last)
        minutes = (due - at(0, day=last.day)).total_seconds() // 60
        assert due > last
        assert minutes % 40 == 7


def test_interval_aligned_rolls_past_midnight():
    """Test the next aligned slot can fall on the following day."""
    reminder = interval_reminder(at(0, day=1), interval_minutes=60, align_to_clock=True)

    assert next_due_date(reminder, at(23, 30), at(23, 45)) == at(0, day=16)


def test_interval_aligned_is_due():
    """Test aligned due-ness uses the latest slot at or before now."""
    created = at(8, 10)
    reminder = interval_reminder(created, align_to_clock=True)

    # 08:00 slot predates creation
    assert not is_due(reminder, None, at(8, 59))
    assert is_due(reminder, None, at(9))

    # Logged after the 09:00 slot: covered until 10:00
    assert not is_due(reminder, at(9, 5), at(9, 30))
    assert is_due(reminder, at(9, 5), at(10))


def test_interval_aligned_is_due_before_alignment_minute():
    """Test the latest slot can be yesterday's when now precedes the alignment."""
    reminder = interval_reminder(at(0, day=1), align_to_clock=True, alignment_minute=30)

    # At 00:10 the latest slot is yesterday 23:30
    assert is_due(reminder, at(23, day=14), at(0, 10))
    assert not is_due(reminder, at(23, 40, day=14), at(0, 10))


def test_interval_goal():
    """Test interval goals compare today's summed counts."""
    reminder = interval_reminder(at(0, day=1), daily_goal=5)
    no_goal = interval_reminder(at(0, day=1))

    assert not is_goal_reached(reminder, at(9), at(10), today_count=4)
    assert is_goal_reached(reminder, at(9), at(10), today_count=5)
    assert not is_goal_reached(no_goal, at(9), at(10), today_count=50)

    # Overdue but goal met -> not due
    assert not is_due(reminder, at(6), at(10), today_count=5)
    assert is_due(reminder, at(6), at(10), today_count=4)


def test_logging_clears_due():
    """Test logging at the due time makes the reminder not due until the next interval."""
    t0 = at(8)
    reminder = interval_reminder(t0, daily_goal=2)

    assert is_due(reminder, None, at(10))

    logged_at = at(10)
    assert not is_due(reminder, logged_at, at(10), today_count=1)
    assert next_due_date(reminder, logged_at, at(10)) == at(11)
    assert not is_goal_reached(reminder, logged_at, at(11), today_count=1)
    assert is_goal_reached(reminder, at(11), at(11), today_count=2)


# Fixed-time reminders


def test_fixed_scenario():
    """Test a 09:00/17:00 reminder through a day."""
    reminder = fixed_reminder(32400, 61200)

    assert next_due_date(reminder, None, at(8)) == at(9)
    assert not is_due(reminder, None, at(8))

    # Missed 09:00 is overdue
    assert next_due_date(reminder, None, at(10)) == at(9)
    assert is_due(reminder, None, at(10))

    # Logged at 09:05 -> 17:00 is next
    assert next_due_date(reminder, at(9, 5), at(10)) == at(17)
    assert not is_due(reminder, at(9, 5), at(10))


def test_fixed_earliest_missed_slot_wins():
    """Test the earliest uncovered past slot comes first."""
    reminder = fixed_reminder(32400, 43200, 61200)

    assert next_due_date(reminder, None, at(18)) == at(9)
    # An entry at 10:00 covers 09:00 only
    assert next_due_date(reminder, at(10), at(18)) == at(12)


def test_fixed_rolls_to_tomorrow():
    """Test the first slot tomorrow once today's slots are covered."""
    reminder = fixed_reminder(61200, 32400)

    assert next_due_date(reminder, at(17, 30), at(18)) == at(9, day=16)


def test_fixed_goal():
    """Test fixed goals need all slots passed and covered."""
    reminder = fixed_reminder(32400, 61200)

    # Slot still ahead
    assert not is_goal_reached(reminder, at(9, 5), at(12))
    # 17:00 missed
    assert not is_goal_reached(reminder, at(9, 5), at(18))
    assert is_goal_reached(reminder, at(17, 30), at(18))
    assert not is_due(reminder, at(17, 30), at(18))


def test_fixed_single_entry_covers_all_slots():
    """Test one entry after the last slot covers earlier unlogged slots.

    Only the latest entry timestamp is tracked, so the never-logged 09:00
    slot counts as covered. This is accepted behaviour.
    """
    reminder = fixed_reminder(32400, 61200)

    assert is_goal_reached(reminder, at(17, 30), at(18))
    assert next_due_date(reminder, at(17, 30), at(18)) == at(9, day=16)


def test_fixed_without_slots():
    """Test a fixed reminder with no slots is never due and counts as reached."""
    reminder = fixed_reminder()

    assert next_due_date(reminder, None, at(12)) == DISTANT_FUTURE
    assert is_goal_reached(reminder, None, at(12))
    assert not is_due(reminder, None, at(12))


def test_fixed_yesterday_entry_does_not_cover_today():
    """Test coverage is judged against today's slot instants."""
    reminder = fixed_reminder(32400)

    assert is_due(reminder, at(20, day=14), at(10))


def test_fixed_local_timezone():
    """Test slots are offsets from local midnight."""
    reminder = fixed_reminder(32400)
    # 12:00 UTC = 08:00 EDT
    now = at(12)

    assert next_due_date(reminder, None, now, tz="America/New_York") == at(13)
    assert not is_due(reminder, None, now, tz="America/New_York")
    assert is_due(reminder, None, at(13), tz="America/New_York")


def test_fixed_is_idempotent():
    """Test repeated calls with the same inputs agree."""
    reminder = fixed_reminder(32400, 61200)

    first = (is_due(reminder, None, at(10)), next_due_date(reminder, None, at(10)))
    second = (is_due(reminder, None, at(10)), next_due_date(reminder, None, at(10)))
    assert first == second


# Entry helpers


def test_entry_helpers():
    """Test last-entry and today's-count helpers over raw entries."""
    entries = [
        ReminderEntry(at(22, day=14), 3),
        ReminderEntry(at(8), 1),
        ReminderEntry(at(9), 0, is_skipped=True),
        ReminderEntry(at(7), 2),
    ]

    assert last_entry_time(entries) == at(9)
    assert last_entry_time([]) is None
    assert today_count(entries, at(12)) == 3


def test_daily_progress():
    """Test progress against the effective goal."""
    assert daily_progress(interval_reminder(at(0), daily_goal=4), 1) == 0.25
    assert daily_progress(interval_reminder(at(0)), 3) == 0.0
    assert daily_progress(fixed_reminder(32400, 61200), 1) == 0.5
