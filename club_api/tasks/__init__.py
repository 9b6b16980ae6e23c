"""Background tasks and job scheduler."""
from club_api.tasks.scheduler import (
    get_scheduler,
    start_scheduler,
    stop_scheduler,
    list_jobs,
)
from club_api.tasks.session_cleanup import session_cleanup_job

__all__ = [
    "get_scheduler",
    "start_scheduler",
    "stop_scheduler",
    "list_jobs",
    "session_cleanup_job",
]
