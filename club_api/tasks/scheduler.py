"""Background job scheduler using APScheduler."""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor


logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> AsyncIOScheduler:
    """Get the global scheduler instance, creating it if necessary."""
    global scheduler
    if scheduler is None:
        scheduler = AsyncIOScheduler(
            jobstores={'default': MemoryJobStore()},
            executors={'default': AsyncIOExecutor()},
            job_defaults={
                'coalesce': True,  # Combine missed job runs into one
                'max_instances': 1,
                'misfire_grace_time': 300
            },
            timezone='UTC'
        )
        logger.info("Scheduler created with UTC timezone")

    return scheduler


async def start_scheduler():
    """Start the scheduler and register all jobs."""
    from club_api.tasks.session_cleanup import schedule_session_cleanup_job

    sched = get_scheduler()

    if sched.running:
        logger.warning("Scheduler is already running")
        return

    schedule_session_cleanup_job(sched)

    sched.start()
    logger.info("Scheduler started with %d jobs", len(sched.get_jobs()))

    for job in sched.get_jobs():
        logger.info("  - Job: %s, Next run: %s", job.id, job.next_run_time)


async def stop_scheduler():
    """Stop the scheduler gracefully."""
    global scheduler
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")
    scheduler = None


def list_jobs() -> list[dict]:
    """List all scheduled jobs and their next run."""
    jobs = []
    for job in get_scheduler().get_jobs():
        # Jobs added before the scheduler starts have no next run time yet
        next_run_time = getattr(job, "next_run_time", None)
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": str(next_run_time) if next_run_time else None,
            "trigger": str(job.trigger),
        })
    return jobs
