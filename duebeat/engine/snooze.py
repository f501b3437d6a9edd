"""Temporary suppression of new overlays."""

import logging
from datetime import datetime, timedelta

from duebeat.config import Config

logger = logging.getLogger(__name__)


class SnoozeGate:
    """Timed switch that holds back new overlays until it expires.

    Lives in process memory only; a restart cancels any snooze.
    """

    def __init__(self) -> None:
        self.snooze_until: datetime | None = None

    def start(self, now: datetime, duration_minutes: int | None = None) -> datetime:
        """Snooze from now, for Config.DEFAULT_SNOOZE_MINUTES unless told otherwise."""
        if duration_minutes is None:
            duration_minutes = Config.DEFAULT_SNOOZE_MINUTES

        self.snooze_until = now + timedelta(minutes=duration_minutes)
        logger.info(f"Snoozed for {duration_minutes} minutes (until {self.snooze_until.isoformat()})")
        return self.snooze_until

    def cancel(self) -> None:
        """Stop snoozing."""
        if self.snooze_until is not None:
            logger.info("Snooze cancelled")
        self.snooze_until = None

    def is_snoozing(self, now: datetime) -> bool:
        return self.snooze_until is not None and now < self.snooze_until

    def remaining(self, now: datetime) -> float:
        """Seconds of snooze left, 0 when not snoozing."""
        if self.snooze_until is None:
            return 0.0
        return max(0.0, (self.snooze_until - now).total_seconds())
