"""APScheduler setup for the recurring poll cycle."""
import asyncio
from datetime import datetime
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from stockwatch.processor import PollCycle

logger = logging.getLogger(__name__)


def setup_scheduler(poll_cycle: PollCycle, interval_seconds: float) -> AsyncIOScheduler:
    """Create a scheduler running the poll cycle every ``interval_seconds``.

    The first tick fires immediately. Ticks that arrive while a cycle is
    still running are dropped rather than queued. Must be called from
    within the running event loop.
    """
    if interval_seconds <= 0:
        raise ValueError(f"Poll interval must be positive, got {interval_seconds}")

    scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
    scheduler.add_job(
        poll_cycle.run_once,
        IntervalTrigger(seconds=interval_seconds),
        id="poll_cycle",
        name=f"Poll quotes every {interval_seconds:g} seconds",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(),
    )
    logger.info(f"Poll cycle scheduled every {interval_seconds:g} seconds")
    return scheduler
