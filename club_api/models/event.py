"""Event and registration models."""
import enum
from sqlalchemy import (
    Column, Integer, String, TIMESTAMP, ForeignKey, Index, Text, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from club_api.database import Base


class EventStatus(str, enum.Enum):
    """Lifecycle status of an event."""
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


class EventCategory(str, enum.Enum):
    """Kind of club event."""
    WORKSHOP = "WORKSHOP"
    LECTURE = "LECTURE"
    SOCIAL = "SOCIAL"
    COMPETITION = "COMPETITION"
    FIELD_TRIP = "FIELD_TRIP"
    CONFERENCE = "CONFERENCE"
    OTHER = "OTHER"


class Event(Base):
    """
    A club event members can register for.

    ``current_capacity`` counts active registrations and is only changed by
    the registration service, never by a plain read-modify-write. When
    ``max_capacity`` is set it is an upper bound for ``current_capacity``.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(20), default=EventCategory.OTHER.value, nullable=False, index=True)
    status = Column(String(20), default=EventStatus.OPEN.value, nullable=False, index=True)

    # Schedule
    date = Column(TIMESTAMP(timezone=True), nullable=False, index=True)
    start_time = Column(String(20), nullable=False)  # e.g., "18:00"
    end_time = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False)
    image_url = Column(String(500), nullable=True)

    # Capacity
    max_capacity = Column(Integer, nullable=True)  # None means unbounded
    current_capacity = Column(Integer, default=0, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    registrations = relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def spots_remaining(self):
        """Seats left, or None for events without a ceiling."""
        if self.max_capacity is None:
            return None
        return max(self.max_capacity - (self.current_capacity or 0), 0)

    @property
    def is_full(self) -> bool:
        return self.max_capacity is not None and (self.current_capacity or 0) >= self.max_capacity

    def __repr__(self):
        return (
            f"<Event(id={self.id}, title={self.title}, status={self.status}, "
            f"capacity={self.current_capacity}/{self.max_capacity})>"
        )


class EventRegistration(Base):
    """
    One participant's registration for one event.

    Created once by the registration service and never mutated; only read or
    deleted by administrative cancellation.
    """
    __tablename__ = "event_registrations"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    event_id = Column(
        Integer,
        ForeignKey('events.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint('user_id', 'event_id', name='uq_registration_user_event'),
        Index('idx_registration_event_created', 'event_id', 'created_at'),
    )

    def __repr__(self):
        return f"<EventRegistration(user_id={self.user_id}, event_id={self.event_id})>"
