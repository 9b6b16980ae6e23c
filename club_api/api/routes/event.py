"""Event API routes: event management and event registration."""
import logging
from typing import Optional, List
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from club_api.dependencies import get_current_admin_user
from club_api.api.utils.pagination import build_pagination
from club_api.api.utils.dependencies import get_event_service, get_registration_service
from club_api.models.event import EventRegistration, EventCategory, EventStatus
from club_api.models.user import User
from club_api.services.event_service import EventService
from club_api.services.exceptions import EventNotFoundError
from club_api.services.notification_service import NotificationService, get_notification_service
from club_api.services.participant_service import ParticipantInfo
from club_api.services.registration_service import RegistrationService
from club_api.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventListResponse,
    EventStatsResponse,
    RegistrationRequest,
    RegistrationResponse,
    RegistrationCreatedResponse,
    CancellationResponse,
    ParticipantBrief,
)
from club_api.schemas.member import MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["Events"])

# Fields an update may clear by sending null (no ceiling, no image)
_NULLABLE_FIELDS = {"max_capacity", "image_url"}


def _registration_response(registration: EventRegistration, user: User) -> RegistrationResponse:
    return RegistrationResponse(
        id=registration.id,
        event_id=registration.event_id,
        user_id=registration.user_id,
        created_at=registration.created_at,
        participant=ParticipantBrief.model_validate(user)
    )


# ============== Public Event Listing ==============

@router.get("", response_model=EventListResponse)
async def list_events(
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    category: Optional[EventCategory] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: EventService = Depends(get_event_service)
):
    """List events ordered by date, with optional status and category filters."""
    events, total = await service.list_events(
        status=status_filter.value if status_filter else None,
        category=category.value if category else None,
        page=page,
        page_size=limit
    )

    return EventListResponse(
        events=[EventResponse.model_validate(event) for event in events],
        pagination=build_pagination(total, page, limit)
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    service: EventService = Depends(get_event_service)
):
    """Get a specific event by ID."""
    event = await service.get_event(event_id)
    if not event:
        raise EventNotFoundError()

    return EventResponse.model_validate(event)


# ============== Event Management (Admin Only) ==============

@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Create a new event. Admin only."""
    event = await service.create_event(**data.model_dump())
    logger.info("Event %d created by admin %d", event.id, current_user.id)
    return EventResponse.model_validate(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """
    Update an event. Admin only.

    The ceiling cannot be lowered below the registrations already taken.
    """
    updates = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE_FIELDS
    }
    event = await service.update_event(event_id, **updates)
    if not event:
        raise EventNotFoundError()

    return EventResponse.model_validate(event)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Delete an event and its registrations. Admin only."""
    if not await service.delete_event(event_id):
        raise EventNotFoundError()

    return MessageResponse(message="Event deleted successfully")


@router.get("/{event_id}/stats", response_model=EventStatsResponse)
async def get_event_stats(
    event_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: EventService = Depends(get_event_service)
):
    """Registration statistics for an event. Admin only."""
    stats = await service.get_event_statistics(event_id)
    if not stats:
        raise EventNotFoundError()

    return EventStatsResponse(**stats)


# ============== Registration ==============

@router.post(
    "/{event_id}/register",
    response_model=RegistrationCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
async def register_for_event(
    event_id: int,
    data: RegistrationRequest,
    background_tasks: BackgroundTasks,
    service: RegistrationService = Depends(get_registration_service),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    Register for an event. No account needed.

    Unknown participants are created from the submitted details. A
    confirmation email is sent after the response; a failed email does not
    undo the registration.
    """
    registration, user, event = await service.register(
        event_id,
        ParticipantInfo(
            display_name=data.name,
            email=data.email,
            external_id=data.external_id,
            program=data.program,
            year=data.year,
        )
    )

    background_tasks.add_task(
        notifier.send_registration_confirmation,
        user.email,
        user.full_name,
        event.title,
        event.date,
        event.location
    )

    return RegistrationCreatedResponse(
        message="Successfully registered for event",
        registration=_registration_response(registration, user)
    )


@router.get("/{event_id}/registrations", response_model=List[RegistrationResponse])
async def list_event_registrations(
    event_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """List an event's registrations in registration order. Admin only."""
    registrations = await service.list_registrations(event_id)
    return [_registration_response(r, r.user) for r in registrations]


@router.delete("/{event_id}/registrations/{registration_id}", response_model=CancellationResponse)
async def cancel_registration(
    event_id: int,
    registration_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """Cancel a registration and free its seat. Admin only."""
    event = await service.cancel_registration(event_id, registration_id)
    logger.info(
        "Admin %d cancelled registration %d for event %d",
        current_user.id, registration_id, event_id
    )

    return CancellationResponse(
        message="Registration cancelled",
        current_capacity=event.current_capacity,
        spots_remaining=event.spots_remaining
    )
