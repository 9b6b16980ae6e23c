"""SQLAlchemy models."""
from club_api.models.user import User, UserRole
from club_api.models.session import Session
from club_api.models.event import Event, EventRegistration, EventStatus, EventCategory
from club_api.models.blog import BlogPost
from club_api.models.team import TeamMember
from club_api.models.contact import ContactMessage
from club_api.models.gallery import GalleryItem, GalleryCategory

__all__ = [
    "User",
    "UserRole",
    "Session",
    "Event",
    "EventRegistration",
    "EventStatus",
    "EventCategory",
    "BlogPost",
    "TeamMember",
    "ContactMessage",
    "GalleryItem",
    "GalleryCategory",
]
