"""Event registration service.

Owns the capacity counter of an event and the set of participants registered
for it. Every change to ``Event.current_capacity`` goes through this module
and happens in the same transaction as the registration insert or delete.

Concurrency control is layered:

* an in-process ``asyncio.Lock`` per event serializes requests handled by the
  same worker, so the whole check/claim/insert sequence for one event runs one
  request at a time;
* inside the transaction the event row is locked (``SELECT ... FOR UPDATE``)
  and the seat is claimed with a conditional ``UPDATE`` that only matches
  while ``current_capacity < max_capacity``, which keeps the ceiling intact
  across worker processes.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, update, or_
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from club_api.models.event import Event, EventRegistration
from club_api.models.user import User
from club_api.services.participant_service import ParticipantService, ParticipantInfo
from club_api.services.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    ClubError,
    EventNotFoundError,
    RegistrationNotFoundError,
    StoreUnavailableError,
)


logger = logging.getLogger(__name__)


class EventLockRegistry:
    """Per-event asyncio locks, dropped once nobody holds or waits on them."""

    def __init__(self):
        self._locks: Dict[int, asyncio.Lock] = {}
        self._users: Dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, event_id: int):
        lock = self._locks.get(event_id)
        if lock is None:
            lock = self._locks[event_id] = asyncio.Lock()
        self._users[event_id] = self._users.get(event_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[event_id] -= 1
            if self._users[event_id] == 0:
                del self._users[event_id]
                del self._locks[event_id]

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every RegistrationService in this process
event_locks = EventLockRegistry()


class RegistrationService:
    """Service for registering participants for events."""

    def __init__(self, session: AsyncSession, locks: Optional[EventLockRegistry] = None):
        """Initialize registration service."""
        self.session = session
        self.locks = locks if locks is not None else event_locks
        self.participants = ParticipantService(session)

    # ============== Commands ==============

    async def register(
        self,
        event_id: int,
        info: ParticipantInfo
    ) -> Tuple[EventRegistration, User, Event]:
        """
        Register a participant for an event.

        Checks, in order: the event exists, the event has a free seat, the
        participant resolves (created if unknown), the participant is not
        already registered. The seat claim, participant creation and
        registration insert commit together or not at all.

        Returns:
            Tuple of (registration, participant, event)

        Raises:
            EventNotFoundError: Event does not exist
            CapacityExceededError: Event has a ceiling and it is reached
            AlreadyRegisteredError: Participant already holds a registration
            StoreUnavailableError: The database failed
        """
        async with self.locks.hold(event_id):
            try:
                event = await self._lock_event(event_id)
                if event is None:
                    raise EventNotFoundError()

                if not await self._claim_seat(event_id):
                    raise CapacityExceededError()

                user, created = await self.participants.resolve_participant(info)

                if not created and await self._find_registration(user.id, event_id):
                    raise AlreadyRegisteredError()

                registration = EventRegistration(user_id=user.id, event_id=event_id)
                self.session.add(registration)
                await self.session.flush()
                # Counter as claimed above, read while the row is still locked
                await self.session.refresh(event)
                await self.session.commit()
            except ClubError as e:
                await self.session.rollback()
                logger.info(
                    "Registration refused: event=%s email=%s reason=%s",
                    event_id, info.email, e.code
                )
                raise
            except IntegrityError:
                # Unique (user_id, event_id) caught a duplicate the lookup missed
                await self.session.rollback()
                logger.info(
                    "Registration refused: event=%s email=%s reason=%s",
                    event_id, info.email, AlreadyRegisteredError.code
                )
                raise AlreadyRegisteredError()
            except DBAPIError as e:
                await self.session.rollback()
                logger.error("Registration failed for event %s: %s", event_id, e)
                raise StoreUnavailableError() from e

            await self.session.refresh(registration)
            await self.session.refresh(user)

        logger.info(
            "Registered user %d for event %d (%d/%s)",
            user.id, event_id, event.current_capacity,
            event.max_capacity if event.max_capacity is not None else "unbounded"
        )
        return registration, user, event

    async def cancel_registration(self, event_id: int, registration_id: int) -> Event:
        """
        Cancel a registration and give its seat back.

        The counter is decremented by exactly one in the same transaction as
        the delete, and never drops below zero.

        Returns:
            The event with its updated counter

        Raises:
            EventNotFoundError: Event does not exist
            RegistrationNotFoundError: No such registration for this event
            StoreUnavailableError: The database failed
        """
        async with self.locks.hold(event_id):
            try:
                event = await self._lock_event(event_id)
                if event is None:
                    raise EventNotFoundError()

                result = await self.session.execute(
                    select(EventRegistration).where(
                        EventRegistration.id == registration_id,
                        EventRegistration.event_id == event_id
                    )
                )
                registration = result.scalar_one_or_none()
                if registration is None:
                    raise RegistrationNotFoundError()

                user_id = registration.user_id
                await self.session.delete(registration)
                await self.session.execute(
                    update(Event)
                    .where(Event.id == event_id, Event.current_capacity > 0)
                    .values(current_capacity=Event.current_capacity - 1)
                    .execution_options(synchronize_session=False)
                )
                await self.session.commit()
            except ClubError:
                await self.session.rollback()
                raise
            except DBAPIError as e:
                await self.session.rollback()
                logger.error("Cancellation failed for event %s: %s", event_id, e)
                raise StoreUnavailableError() from e

        await self.session.refresh(event)
        logger.info(
            "Cancelled registration %d (user %d) for event %d, count now %d",
            registration_id, user_id, event_id, event.current_capacity
        )
        return event

    # ============== Queries ==============

    async def list_registrations(self, event_id: int) -> List[EventRegistration]:
        """
        List registrations for an event with participant details, oldest first.

        Raises:
            EventNotFoundError: Event does not exist
        """
        try:
            event = await self.session.get(Event, event_id)
            if event is None:
                raise EventNotFoundError()

            result = await self.session.execute(
                select(EventRegistration)
                .options(selectinload(EventRegistration.user))
                .where(EventRegistration.event_id == event_id)
                .order_by(EventRegistration.created_at.asc(), EventRegistration.id.asc())
            )
            return list(result.scalars().all())
        except DBAPIError as e:
            logger.error("Could not list registrations for event %s: %s", event_id, e)
            raise StoreUnavailableError() from e

    async def get_registration(self, event_id: int, user_id: int) -> Optional[EventRegistration]:
        """Get the registration of a user for an event, if any."""
        return await self._find_registration(user_id, event_id)

    # ============== Internals ==============

    async def _lock_event(self, event_id: int) -> Optional[Event]:
        """Load the event row and hold its lock until the transaction ends."""
        result = await self.session.execute(
            select(Event)
            .where(Event.id == event_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _claim_seat(self, event_id: int) -> bool:
        """Compare-and-increment the counter; False when the ceiling is reached."""
        result = await self.session.execute(
            update(Event)
            .where(
                Event.id == event_id,
                or_(
                    Event.max_capacity.is_(None),
                    Event.current_capacity < Event.max_capacity
                )
            )
            .values(current_capacity=Event.current_capacity + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _find_registration(self, user_id: int, event_id: int) -> Optional[EventRegistration]:
        result = await self.session.execute(
            select(EventRegistration).where(
                EventRegistration.user_id == user_id,
                EventRegistration.event_id == event_id
            )
        )
        return result.scalar_one_or_none()
