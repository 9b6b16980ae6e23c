"""Service layer."""
from club_api.services.auth_service import AuthService
from club_api.services.participant_service import ParticipantService, ParticipantInfo
from club_api.services.registration_service import RegistrationService, EventLockRegistry, event_locks
from club_api.services.event_service import EventService
from club_api.services.blog_store import BlogFileStore
from club_api.services.blog_service import BlogService
from club_api.services.team_service import TeamService
from club_api.services.contact_service import ContactService
from club_api.services.gallery_service import GalleryService
from club_api.services.notification_service import NotificationService

__all__ = [
    "AuthService",
    "ParticipantService",
    "ParticipantInfo",
    "RegistrationService",
    "EventLockRegistry",
    "event_locks",
    "EventService",
    "BlogFileStore",
    "BlogService",
    "TeamService",
    "ContactService",
    "GalleryService",
    "NotificationService",
]
