"""Daily background jobs, run on the shared tenant clock."""

from __future__ import annotations

import logging
from datetime import time

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .common.datetime_utils import get_zone
from .container import Container
from .core.constants import AUTO_CLOSE_TIME, DAILY_FLAG_RESET_TIME, DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

AUTO_CLOSE_JOB_ID = "attendance-auto-close"
FLAG_RESET_JOB_ID = "settings-daily-flag-reset"


def build_scheduler(
    container: Container,
    *,
    timezone: str = DEFAULT_TIMEZONE,
    auto_close_time: time = AUTO_CLOSE_TIME,
) -> BackgroundScheduler:
    """Scheduler with the auto-close and flag-reset jobs registered, not started."""
    zone = get_zone(timezone)
    scheduler = BackgroundScheduler(
        timezone=zone,
        job_defaults={
            "coalesce": True,
            "misfire_grace_time": 3600,
        },
    )

    scheduler.add_job(
        container.auto_closer.run,
        CronTrigger(hour=auto_close_time.hour, minute=auto_close_time.minute, timezone=zone),
        id=AUTO_CLOSE_JOB_ID,
        name="Close open attendance sessions",
        replace_existing=True,
    )
    scheduler.add_job(
        container.settings_service.reset_daily_flags,
        CronTrigger(hour=DAILY_FLAG_RESET_TIME.hour, minute=DAILY_FLAG_RESET_TIME.minute, timezone=zone),
        id=FLAG_RESET_JOB_ID,
        name="Reset daily report flags",
        replace_existing=True,
    )

    logger.info(
        "Scheduled auto-close at %s and flag reset at %s (%s)",
        auto_close_time.strftime("%H:%M"),
        DAILY_FLAG_RESET_TIME.strftime("%H:%M"),
        timezone,
    )
    return scheduler
