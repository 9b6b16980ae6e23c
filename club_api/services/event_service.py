"""Event service for managing events."""
import logging
from typing import Optional, List, Tuple
from sqlalchemy import select, func, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from club_api.models.event import Event, EventRegistration
from club_api.models.gallery import GalleryItem
from club_api.services.exceptions import ValidationError
from club_api.services.registration_service import event_locks


logger = logging.getLogger(__name__)

# Fields the registration service owns
_PROTECTED_FIELDS = {"id", "current_capacity", "created_at", "updated_at"}


class EventService:
    """Service for managing events."""

    def __init__(self, session: AsyncSession):
        """Initialize event service."""
        self.session = session

    async def get_event(self, event_id: int) -> Optional[Event]:
        """Get an event by ID."""
        result = await self.session.execute(
            select(Event).where(Event.id == event_id)
        )
        return result.scalar_one_or_none()

    async def list_events(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Event], int]:
        """
        List events ordered by date, soonest first.

        Args:
            status: Optional lifecycle status filter (draft/open/closed)
            category: Optional category filter
            page: Page number (1-indexed)
            page_size: Events per page

        Returns:
            Tuple of (events, total matching events)
        """
        query = select(Event)
        count_query = select(func.count(Event.id))

        if status:
            query = query.where(Event.status == status)
            count_query = count_query.where(Event.status == status)

        if category:
            query = query.where(Event.category == category)
            count_query = count_query.where(Event.category == category)

        total = (await self.session.execute(count_query)).scalar() or 0

        offset = (page - 1) * page_size
        query = query.order_by(Event.date.asc(), Event.id.asc()).offset(offset).limit(page_size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def create_event(self, **kwargs) -> Event:
        """
        Create a new event.

        Args:
            **kwargs: Event fields (title, description, date, max_capacity, etc.)

        Returns:
            Created event with an empty registration count
        """
        fields = {k: v for k, v in kwargs.items() if k not in _PROTECTED_FIELDS}
        event = Event(current_capacity=0, **fields)
        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)
        logger.info("Created event %s (id=%d)", event.title, event.id)
        return event

    async def update_event(self, event_id: int, **kwargs) -> Optional[Event]:
        """
        Update an event with the provided fields.

        The registration count cannot be edited, and a ceiling cannot be
        lowered below the number of registrations already taken.

        Returns:
            Updated event or None if not found

        Raises:
            ValidationError: New ceiling is below the current count
        """
        async with event_locks.hold(event_id):
            event = await self.get_event(event_id)
            if not event:
                return None

            if "max_capacity" in kwargs:
                new_ceiling = kwargs["max_capacity"]
                if new_ceiling is not None and new_ceiling < event.current_capacity:
                    raise ValidationError(
                        f"Max capacity cannot be lower than the {event.current_capacity} "
                        f"registrations already taken"
                    )

            for key, value in kwargs.items():
                if key not in _PROTECTED_FIELDS and hasattr(event, key):
                    setattr(event, key, value)

            await self.session.commit()
            await self.session.refresh(event)
        return event

    async def delete_event(self, event_id: int) -> bool:
        """
        Delete an event together with its registrations.

        Gallery items of the event are kept and unlinked from it.

        Returns:
            True if deleted, False if not found
        """
        async with event_locks.hold(event_id):
            event = await self.get_event(event_id)
            if not event:
                return False

            await self.session.execute(
                delete(EventRegistration).where(EventRegistration.event_id == event_id)
            )
            await self.session.execute(
                update(GalleryItem)
                .where(GalleryItem.event_id == event_id)
                .values(event_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.session.delete(event)
            await self.session.commit()
        logger.info("Deleted event %d", event_id)
        return True

    async def get_event_statistics(self, event_id: int) -> dict:
        """
        Get registration statistics for an event.

        Returns:
            Dictionary with the ceiling, the counter, the number of
            registration rows and the seats remaining (None when unbounded)
        """
        event = await self.get_event(event_id)
        if not event:
            return {}

        registration_count = (await self.session.execute(
            select(func.count(EventRegistration.id))
            .where(EventRegistration.event_id == event_id)
        )).scalar() or 0

        return {
            "event_id": event.id,
            "max_capacity": event.max_capacity,
            "current_capacity": event.current_capacity,
            "registration_count": registration_count,
            "spots_remaining": event.spots_remaining,
        }
