"""Constants and default values."""

from datetime import datetime, timezone

# "Never due" sentinel for reminders with nothing to schedule
DISTANT_FUTURE = datetime.max.replace(tzinfo=timezone.utc)

# Fixed-time slots closer than this are treated as duplicates on insert
FIXED_TIME_MIN_GAP_SECONDS = 60

# Default timezone
DEFAULT_TIMEZONE = "UTC"
