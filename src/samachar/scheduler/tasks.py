"""Scheduled job definitions."""

import logging
from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from samachar.config import Settings
from samachar.core.orchestrator import CycleOrchestrator

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


async def cycle_task(orchestrator: CycleOrchestrator) -> None:
    """Run one ingestion cycle unless one is already in progress."""
    report = await orchestrator.run_cycle()
    if report is None:
        logger.info("Previous cycle still running, skipping this tick")


def create_scheduler(
    settings: Settings, orchestrator: CycleOrchestrator
) -> AsyncIOScheduler:
    """Create and start the cycle scheduler."""
    global _scheduler

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        cycle_task,
        "interval",
        minutes=settings.poll_minutes,
        args=[orchestrator],
        id="news_cycle",
        name="News ingestion cycle",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )

    # First run shortly after startup
    _scheduler.add_job(
        cycle_task,
        "date",
        run_date=datetime.now() + timedelta(seconds=settings.initial_delay_seconds),
        args=[orchestrator],
        id="news_cycle_initial",
        name="Initial news cycle",
    )

    _scheduler.start()
    logger.info(f"Scheduler started, cycle interval: {settings.poll_minutes} minutes")

    return _scheduler


async def shutdown_scheduler() -> None:
    """Stop the scheduler."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
        _scheduler = None
