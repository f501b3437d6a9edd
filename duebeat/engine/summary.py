"""Read-only views over the reminder set for menus and dashboards."""

from datetime import datetime
from typing import Iterable, List

from duebeat.engine.due import is_goal_reached, next_due_date
from duebeat.engine.time_window import is_inside, latest_window_end
from duebeat.models import Profile, ReminderSnapshot
from duebeat.utils.time_utils import format_short_time


def _goal_reached(snap: ReminderSnapshot, now: datetime, profile: Profile) -> bool:
    return is_goal_reached(
        snap.config, snap.last_entry, now, today_count=snap.today_count, tz=profile.timezone
    )


def _due_at(snap: ReminderSnapshot, now: datetime, profile: Profile) -> datetime:
    dnd_floor = latest_window_end(now, profile.dnd, profile.timezone)
    return next_due_date(
        snap.config,
        snap.last_entry,
        now,
        dnd_floor,
        today_count=snap.today_count,
        tz=profile.timezone,
    )


def upcoming_reminders(
    snapshots: Iterable[ReminderSnapshot], profile: Profile, now: datetime
) -> List[ReminderSnapshot]:
    """Reminders with work left today, soonest due first."""
    pending = [snap for snap in snapshots if not _goal_reached(snap, now, profile)]
    return sorted(pending, key=lambda snap: _due_at(snap, now, profile))


def completed_reminders(
    snapshots: Iterable[ReminderSnapshot], profile: Profile, now: datetime
) -> List[ReminderSnapshot]:
    """Reminders whose goal for today is reached, by name."""
    done = [snap for snap in snapshots if _goal_reached(snap, now, profile)]
    return sorted(done, key=lambda snap: snap.config.name)


def next_event_title(
    snapshots: Iterable[ReminderSnapshot], profile: Profile, now: datetime
) -> str:
    """One-line status for the menu bar.

    Examples:
        "Ready: Drink water"
        "45m until Stretch"
        "Do Not Disturb"
    """
    snapshots = [snap for snap in snapshots if not snap.config.is_archived]
    if not snapshots:
        return "No reminders"

    if is_inside(now, profile.dnd, profile.timezone):
        return "Do Not Disturb"

    upcoming = upcoming_reminders(snapshots, profile, now)
    if not upcoming:
        return "All goals reached"

    following = upcoming[0]
    due_at = _due_at(following, now, profile)
    if due_at <= now:
        return f"Ready: {following.config.name}"

    remaining = (due_at - now).total_seconds()
    return f"{format_short_time(remaining)} until {following.config.name}"
