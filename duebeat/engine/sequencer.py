"""Sequencer - decides which due reminder the overlay presents.

Driven by a periodic tick and by `logged()` after the user completes or
skips a reminder. It is level-triggered: every call recomputes from the
current inputs, so a dropped or late tick only delays detection.

The notified set holds the reminders already surfaced in the current
due-cycle. It keeps a reminder from popping up again until it stops being
due, and lets `logged()` hand off to the next due reminder in turn.
"""

import logging
from copy import deepcopy
from datetime import datetime
from typing import Iterable, List, Tuple

from duebeat.engine.due import is_goal_reached, next_due_date
from duebeat.engine.snooze import SnoozeGate
from duebeat.engine.time_window import is_inside, latest_window_end
from duebeat.models import OverlayEvent, Profile, ReminderEntry, ReminderSnapshot, SequencerState

logger = logging.getLogger(__name__)


def _active(snapshots: Iterable[ReminderSnapshot]) -> List[ReminderSnapshot]:
    return [snap for snap in snapshots if not snap.config.is_archived]


def _pending_due_dates(
    snapshots: Iterable[ReminderSnapshot], now: datetime, profile: Profile
) -> List[Tuple[ReminderSnapshot, datetime]]:
    """Next-due date of every reminder whose goal is not yet reached, in input order."""
    tz = profile.timezone
    dnd_floor = latest_window_end(now, profile.dnd, tz)

    pending = []
    for snap in _active(snapshots):
        if is_goal_reached(
            snap.config, snap.last_entry, now, dnd_floor, today_count=snap.today_count, tz=tz
        ):
            continue
        due_at = next_due_date(
            snap.config, snap.last_entry, now, dnd_floor, today_count=snap.today_count, tz=tz
        )
        pending.append((snap, due_at))
    return pending


class Sequencer:
    """Owns the overlay state; mutated only through tick() and logged()."""

    def __init__(self, snooze: SnoozeGate | None = None) -> None:
        self._state = SequencerState()
        self.snooze = snooze or SnoozeGate()

    @property
    def state(self) -> SequencerState:
        """Copy of the current state."""
        state = deepcopy(self._state)
        state.snooze_until = self.snooze.snooze_until
        return state

    @property
    def is_showing(self) -> bool:
        return self._state.overlay_open

    @property
    def active_reminder_id(self) -> str | None:
        return self._state.active_reminder_id

    def overlay_elapsed(self, now: datetime) -> float | None:
        """Seconds since the overlay opened for the active reminder."""
        if self._state.overlay_opened_at is None:
            return None
        return (now - self._state.overlay_opened_at).total_seconds()

    def make_entry(
        self, reminder_id: str, count: int, now: datetime, is_skipped: bool = False
    ) -> ReminderEntry:
        """Build the entry to persist before calling `logged()`.

        The duration is only known when the entry answers the open overlay.
        """
        duration = None
        if self._state.overlay_open and self._state.active_reminder_id == reminder_id:
            duration = self.overlay_elapsed(now)
        return ReminderEntry(now, count, is_skipped=is_skipped, duration_seconds=duration)

    def reset(self, now: datetime) -> OverlayEvent | None:
        """Drop all bookkeeping, e.g. when switching profiles."""
        logger.debug("Sequencer state reset")
        return self._close(now, "state reset")

    # Transitions

    def tick(
        self, snapshots: Iterable[ReminderSnapshot], profile: Profile, now: datetime
    ) -> OverlayEvent | None:
        """Re-evaluate all reminders and open the overlay if one became due.

        Returns:
            The overlay change this tick caused, if any
        """
        if is_inside(now, profile.dnd, profile.timezone):
            return self._suppress(now)

        pending = _pending_due_dates(snapshots, now, profile)
        if not pending:
            return None

        # Earliest due date wins; ties keep input order
        snap, due_at = min(pending, key=lambda item: item[1])
        reminder_id = snap.config.id

        if due_at > now:
            # Not due any more, so a later occurrence may notify again
            self._state.notified_ids.discard(reminder_id)
            return None

        if self._state.overlay_open:
            # Never preempt an open overlay
            return None

        if reminder_id in self._state.notified_ids or self.snooze.is_snoozing(now):
            return None

        return self._show(reminder_id, now)

    def logged(
        self,
        reminder_id: str,
        snapshots: Iterable[ReminderSnapshot],
        profile: Profile,
        now: datetime,
    ) -> OverlayEvent | None:
        """Hand off to the next due reminder after an entry was logged.

        `snapshots` must already reflect the new entry. Reminders still in
        the notified set are passed over; when nothing else is due the
        overlay closes and the due-cycle's bookkeeping is cleared.
        """
        self._state.notified_ids.discard(reminder_id)

        if is_inside(now, profile.dnd, profile.timezone):
            return self._suppress(now)

        for snap, due_at in _pending_due_dates(snapshots, now, profile):
            if snap.config.id in self._state.notified_ids:
                continue
            if due_at <= now:
                return self._show(snap.config.id, now)

        return self._close(now, "due-cycle complete")

    # State changes

    def _show(self, reminder_id: str, now: datetime) -> OverlayEvent:
        action = "advance" if self._state.overlay_open else "open"

        self._state.active_reminder_id = reminder_id
        self._state.notified_ids.add(reminder_id)
        self._state.overlay_open = True
        self._state.overlay_opened_at = now

        logger.info(f"Overlay {action}: reminder {reminder_id}")
        return OverlayEvent(action, reminder_id, now)

    def _close(self, now: datetime, reason: str) -> OverlayEvent | None:
        was_open = self._state.overlay_open
        previous_id = self._state.active_reminder_id

        self._state = SequencerState()

        if not was_open:
            return None

        logger.info(f"Overlay closed: {reason}")
        return OverlayEvent("close", previous_id, now)

    def _suppress(self, now: datetime) -> OverlayEvent | None:
        """DND: nothing may notify, and the due-cycle starts over afterwards."""
        if self._state.notified_ids or self._state.overlay_open:
            logger.debug("Inside DND window, clearing notification state")
        return self._close(now, "do-not-disturb")
