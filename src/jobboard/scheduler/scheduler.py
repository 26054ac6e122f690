"""APScheduler-based search index health check.

The index client latches availability once at startup. Deployments that want
the index to come back without a restart enable this periodic re-probe; it
re-runs index initialization when the engine becomes reachable again.
"""

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from jobboard.config import JobBoardConfig
from jobboard.db import get_session
from jobboard.search.service import JobSearchService

logger = logging.getLogger(__name__)

JOB_ID = "jobboard_index_health"


def health_check_task(service: JobSearchService, engine) -> bool:
    """Re-probe the index; reinitialize it after an outage. Returns current availability."""
    was_available = service.available
    if was_available:
        service.client.probe()
        if not service.available:
            logger.warning("Search index became unavailable")
        return service.available

    session = get_session(engine)
    try:
        service.initialize_indices(session)
    finally:
        session.close()

    if service.available:
        logger.info("Search index recovered, indices reinitialized")
    return service.available


def parse_cron(cron_expr: str) -> dict:
    """Parse a cron expression into APScheduler CronTrigger kwargs."""
    parts = cron_expr.strip().split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {cron_expr}")
    return {
        "minute": parts[0],
        "hour": parts[1],
        "day": parts[2],
        "month": parts[3],
        "day_of_week": parts[4],
    }


def start_scheduler(config: JobBoardConfig, service: JobSearchService, engine) -> BackgroundScheduler:
    """Start the background scheduler with the health check task."""
    scheduler = BackgroundScheduler()
    cron_kwargs = parse_cron(config.health_check.cron)

    scheduler.add_job(
        health_check_task,
        trigger=CronTrigger(**cron_kwargs),
        args=[service, engine],
        id=JOB_ID,
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Index health check started with cron: %s", config.health_check.cron)
    return scheduler


def stop_scheduler(scheduler: BackgroundScheduler):
    """Shut down the scheduler gracefully."""
    scheduler.shutdown(wait=False)
    logger.info("Index health check stopped")


def get_next_run_time(scheduler: BackgroundScheduler) -> datetime | None:
    """Get next scheduled health check time."""
    job = scheduler.get_job(JOB_ID)
    if job:
        return job.next_run_time
    return None
