"""Common dependency injection utilities."""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.config import get_settings
from club_api.database import get_db
from club_api.services.blog_service import BlogService
from club_api.services.blog_store import BlogFileStore
from club_api.services.contact_service import ContactService
from club_api.services.event_service import EventService
from club_api.services.gallery_service import GalleryService
from club_api.services.participant_service import ParticipantService
from club_api.services.registration_service import RegistrationService
from club_api.services.team_service import TeamService


async def get_participant_service(
    db: AsyncSession = Depends(get_db)
) -> ParticipantService:
    """
    Get ParticipantService instance.

    Args:
        db: Database session from dependency injection

    Returns:
        Initialized ParticipantService
    """
    return ParticipantService(db)


async def get_event_service(
    db: AsyncSession = Depends(get_db)
) -> EventService:
    """
    Get EventService instance.

    Args:
        db: Database session from dependency injection

    Returns:
        Initialized EventService
    """
    return EventService(db)


async def get_registration_service(
    db: AsyncSession = Depends(get_db)
) -> RegistrationService:
    """
    Get RegistrationService instance.

    All instances share the process-wide per-event lock registry.
    """
    return RegistrationService(db)


@lru_cache()
def get_blog_store() -> BlogFileStore:
    """Process-wide blog file store (one lock per document)."""
    return BlogFileStore(get_settings().BLOG_DATA_DIR)


async def get_blog_service(
    db: AsyncSession = Depends(get_db),
    store: BlogFileStore = Depends(get_blog_store)
) -> BlogService:
    """Get BlogService instance."""
    return BlogService(db, store)


async def get_team_service(
    db: AsyncSession = Depends(get_db)
) -> TeamService:
    """Get TeamService instance."""
    return TeamService(db)


async def get_contact_service(
    db: AsyncSession = Depends(get_db)
) -> ContactService:
    """Get ContactService instance."""
    return ContactService(db)


async def get_gallery_service(
    db: AsyncSession = Depends(get_db)
) -> GalleryService:
    """Get GalleryService instance."""
    return GalleryService(db)
