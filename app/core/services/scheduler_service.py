"""
Scheduler Service - APScheduler integration for the membership expiry sweep.

The Access Guard never relies on the stored ``expired`` status; the sweep only
keeps that column tidy for listings and reports. Disabled unless
MEMBERSHIP_SWEEP_ENABLED is set.
"""
import logging
from typing import List

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.services.membership_service import MembershipService

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "membership_expiry_sweep"


def create_scheduler(membership: MembershipService, interval_minutes: int) -> AsyncIOScheduler:
    """Build (not start) a scheduler running the expiry sweep every ``interval_minutes``."""
    scheduler = AsyncIOScheduler(
        job_defaults={"coalesce": True, "max_instances": 1},
    )
    scheduler.add_job(
        membership.expire_lapsed,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=SWEEP_JOB_ID,
        name="Expire lapsed memberships",
        replace_existing=True,
    )
    return scheduler


def start_scheduler(scheduler: AsyncIOScheduler) -> None:
    if not scheduler.running:
        scheduler.start()
        logger.info(f"APScheduler started: {[job.id for job in scheduler.get_jobs()]}")


def shutdown_scheduler(scheduler: AsyncIOScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler shutdown")


def get_scheduler_jobs(scheduler: AsyncIOScheduler) -> List[dict]:
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            "trigger": str(job.trigger),
        }
        for job in scheduler.get_jobs()
    ]
