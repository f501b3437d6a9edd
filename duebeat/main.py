"""Entry point for running the scheduler loop inside a host application."""

import asyncio
import logging
import sys

from duebeat.config import Config
from duebeat.engine.heartbeat import EventSink, ReminderSource, build_scheduler
from duebeat.engine.sequencer import Sequencer

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from Config."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        stream=sys.stdout,
    )


async def serve(
    source: ReminderSource,
    on_event: EventSink,
    sequencer: Sequencer | None = None,
    stop: asyncio.Event | None = None,
    interval: float | None = None,
) -> Sequencer:
    """Run the heartbeat until `stop` is set and return the sequencer used."""
    sequencer = sequencer or Sequencer()
    stop = stop or asyncio.Event()

    scheduler = build_scheduler(sequencer, source, on_event, interval)
    scheduler.start()
    logger.info("Heartbeat started")

    try:
        await stop.wait()
    finally:
        scheduler.shutdown(wait=False)
        logger.info("Heartbeat stopped")

    return sequencer


def main(source: ReminderSource, on_event: EventSink) -> None:
    """Start the scheduler loop."""
    configure_logging()

    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("Starting scheduler...")
    try:
        asyncio.run(serve(source, on_event))
    except KeyboardInterrupt:
        logger.info("Scheduler shut down")
