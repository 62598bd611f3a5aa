# tasks/scheduler.py
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi.concurrency import run_in_threadpool

from skillnexis.config import settings
from skillnexis.repos.admin_data import AdminDataManager

logger = logging.getLogger(__name__)

def create_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler(timezone="UTC")

def schedule_jobs(scheduler: AsyncIOScheduler, manager: AdminDataManager) -> None:
    # newUsersThisMonth and activeUsers drift with the clock, not only with writes
    scheduler.add_job(
        refresh_stats,
        trigger=CronTrigger(hour=settings.STATS_REFRESH_HOUR, minute=0, timezone="UTC"),
        args=[manager],
        id="refresh_stats",
        replace_existing=True,
    )

async def refresh_stats(manager: AdminDataManager):
    try:
        stats = await run_in_threadpool(manager.update_stats)
        logger.info(f"Stats refreshed: {stats}")
    except ConnectionError as e:
        logger.error(f"Stats refresh failed, store unavailable: {str(e)}")
