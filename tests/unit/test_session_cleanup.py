"""
Unit tests for the session cleanup job and scheduler wiring.
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from club_api.models.session import Session
from club_api.models.user import User
from club_api.services.auth_service import AuthService
from club_api.tasks import scheduler as scheduler_module
from club_api.tasks.session_cleanup import session_cleanup_job, schedule_session_cleanup_job


@pytest.mark.unit
@pytest.mark.asyncio
class TestSessionCleanupJob:
    """Test the periodic session cleanup."""

    async def test_job_removes_expired_sessions(
        self, async_engine, db_session: AsyncSession, member_user: User
    ):
        """Test the job deletes expired sessions through its own session."""
        await AuthService(db_session, session_expiry_hours=-1).create_session(member_user.id)
        await AuthService(db_session).create_session(member_user.id)

        factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
        deleted = await session_cleanup_job(session_factory=factory)

        assert deleted == 1
        remaining = (await db_session.execute(select(func.count(Session.id)))).scalar()
        assert remaining == 1

    async def test_job_with_nothing_to_clean(self, async_engine):
        """Test the job reports zero when there is nothing to remove."""
        factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
        assert await session_cleanup_job(session_factory=factory) == 0


@pytest.mark.unit
class TestScheduler:
    """Test job registration."""

    def test_cleanup_job_registered(self):
        """Test the cleanup job is added on an interval trigger."""
        sched = scheduler_module.get_scheduler()
        try:
            schedule_session_cleanup_job(sched)
            jobs = scheduler_module.list_jobs()
            assert [job["id"] for job in jobs] == ["session_cleanup"]
            assert "interval" in jobs[0]["trigger"]
        finally:
            sched.remove_all_jobs()
            scheduler_module.scheduler = None
