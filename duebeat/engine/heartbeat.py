"""Heartbeat - the periodic tick that drives the sequencer."""

import logging
from datetime import datetime
from typing import Callable, List, Protocol
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from duebeat.config import Config
from duebeat.engine.sequencer import Sequencer
from duebeat.models import OverlayEvent, Profile, ReminderSnapshot

logger = logging.getLogger(__name__)

EventSink = Callable[[OverlayEvent], None]

HEARTBEAT_JOB_ID = "heartbeat"


class ReminderSource(Protocol):
    """Storage-side collaborator feeding each tick."""

    def active_profile(self) -> Profile:
        ...

    def snapshots(self) -> List[ReminderSnapshot]:
        """Non-archived reminders of the active profile with their latest entry data."""
        ...


def heartbeat(
    sequencer: Sequencer,
    source: ReminderSource,
    on_event: EventSink,
    now: datetime | None = None,
) -> OverlayEvent | None:
    """Run one tick and forward any overlay change to the presentation layer.

    A failing tick is logged and dropped; the next one recomputes everything
    from scratch, so nothing is lost but a little latency.
    """
    if now is None:
        now = datetime.now(ZoneInfo("UTC"))

    try:
        event = sequencer.tick(source.snapshots(), source.active_profile(), now)
    except Exception as e:
        logger.error(f"Heartbeat error: {e}")
        return None

    if event is not None:
        on_event(event)
    return event


async def heartbeat_job(sequencer: Sequencer, source: ReminderSource, on_event: EventSink) -> None:
    """Job callback for the heartbeat.

    A coroutine, so the scheduler runs it on the event loop rather than in a
    worker thread.
    """
    heartbeat(sequencer, source, on_event)


def build_scheduler(
    sequencer: Sequencer,
    source: ReminderSource,
    on_event: EventSink,
    interval: float | None = None,
) -> AsyncIOScheduler:
    """Create a scheduler with the heartbeat job registered (not started).

    `max_instances=1` keeps ticks from overlapping; late ticks are coalesced
    because each one recomputes from current state anyway.
    """
    if interval is None:
        interval = Config.TICK_INTERVAL

    scheduler = AsyncIOScheduler(timezone=Config.TIMEZONE)
    scheduler.add_job(
        heartbeat_job,
        trigger=IntervalTrigger(seconds=interval),
        id=HEARTBEAT_JOB_ID,
        name="heartbeat",
        args=[sequencer, source, on_event],
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(f"Heartbeat job scheduled (interval: {interval}s)")
    return scheduler
