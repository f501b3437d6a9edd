"""Do-not-disturb window arithmetic."""

from datetime import datetime

from duebeat.models import DNDWindow
from duebeat.utils.constants import DEFAULT_TIMEZONE
from duebeat.utils.time_utils import at_offset, local_day_start, seconds_since_midnight, shift_days


def is_inside(now: datetime, window: DNDWindow, tz: str = DEFAULT_TIMEZONE) -> bool:
    """Check if now falls within the DND window.

    The start is inclusive and the end exclusive. A window whose start is at
    or after its end spans midnight (e.g. 22:00 to 08:00).
    """
    if not window.enabled:
        return False

    current = seconds_since_midnight(now, tz)

    if window.start_seconds < window.end_seconds:
        return window.start_seconds <= current < window.end_seconds
    else:
        return current >= window.start_seconds or current < window.end_seconds


def latest_window_end(
    now: datetime, window: DNDWindow, tz: str = DEFAULT_TIMEZONE
) -> datetime | None:
    """Get the end of the most recently completed DND window.

    Used as a floor for interval rescheduling, so it is never in the future:
    today's end if it has already passed, otherwise yesterday's.

    Args:
        now: The current datetime (UTC)
        window: DND configuration of the active profile
        tz: Timezone of the local calendar

    Returns:
        The end instant (UTC), or None if DND is disabled
    """
    if not window.enabled:
        return None

    today = local_day_start(now, tz)

    # Intra-day and overnight windows share the rule: the end boundary is
    # what matters, and before it today the last completed window was
    # yesterday's (whether we are inside the window or before it starts).
    if seconds_since_midnight(now, tz) >= window.end_seconds:
        return at_offset(today, window.end_seconds, tz)

    return at_offset(shift_days(today, -1), window.end_seconds, tz)
