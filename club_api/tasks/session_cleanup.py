"""Session cleanup background job - removes expired sessions."""
import logging
from datetime import datetime, timezone
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from club_api.config import get_settings
from club_api.database import AsyncSessionLocal
from club_api.services.auth_service import AuthService


logger = logging.getLogger(__name__)


async def session_cleanup_job(session_factory=AsyncSessionLocal) -> int:
    """
    Remove expired and inactive login sessions.

    Returns:
        Number of sessions deleted
    """
    logger.info("Starting session cleanup job...")
    start_time = datetime.now(timezone.utc)

    try:
        async with session_factory() as session:
            deleted_count = await AuthService(session).cleanup_expired_sessions()
    except Exception as e:
        logger.error("Session cleanup job failed: %s", str(e))
        raise

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    if deleted_count:
        logger.info(
            "Session cleanup completed: %d sessions deleted in %.2f seconds",
            deleted_count, duration
        )
    else:
        logger.info("No expired sessions to clean up")
    return deleted_count


def schedule_session_cleanup_job(scheduler: AsyncIOScheduler):
    """Register the session cleanup job with the scheduler."""
    minutes = get_settings().SESSION_CLEANUP_INTERVAL_MINUTES
    scheduler.add_job(
        session_cleanup_job,
        'interval',
        minutes=minutes,
        id='session_cleanup',
        name='Session Cleanup',
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )

    logger.info("Scheduled session cleanup job to run every %d minutes", minutes)
