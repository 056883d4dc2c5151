"""APScheduler job definitions."""

import logging
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from orderwatch.config import settings
from orderwatch.worker.tasks import SourceChecker

logger = logging.getLogger(__name__)

MIN_POLL_SECONDS = 5


def setup_scheduler(checker: SourceChecker) -> AsyncIOScheduler:
    """
    Setup and configure APScheduler.

    One job runs a full poll cycle over the enabled sources. Overlapping
    cycles are never started; a late cycle is coalesced into one run.

    Returns:
        Configured scheduler instance
    """
    scheduler = AsyncIOScheduler()
    poll_seconds = max(MIN_POLL_SECONDS, settings.poll_seconds)

    scheduler.add_job(
        checker.run_cycle,
        IntervalTrigger(seconds=poll_seconds),
        id="poll_cycle",
        name="Poll market sources for buy order changes",
        next_run_time=datetime.now() + timedelta(seconds=settings.startup_delay_seconds),
        max_instances=1,  # Prevent overlapping runs
        coalesce=True,
        misfire_grace_time=poll_seconds,
        replace_existing=True,
    )

    logger.info(
        "Scheduler configured: poll cycle every %d seconds, first run in %d seconds",
        poll_seconds,
        settings.startup_delay_seconds,
    )

    return scheduler
