"""Pydantic schemas for events and event registration."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from club_api.api.utils.validation import check_display_name
from club_api.models.event import EventCategory, EventStatus


class EventBase(BaseModel):
    """Base event schema."""
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10)
    category: EventCategory = EventCategory.OTHER.value
    status: EventStatus = EventStatus.OPEN.value
    date: datetime
    start_time: str = Field(..., min_length=1, max_length=20)
    end_time: str = Field(..., min_length=1, max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)
    max_capacity: Optional[int] = Field(None, ge=1, description="Registration ceiling (omit for unbounded)")

    model_config = {"str_strip_whitespace": True, "use_enum_values": True}


class EventCreate(EventBase):
    """Schema for creating an event."""
    pass


class EventUpdate(BaseModel):
    """Schema for updating an event."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10)
    category: Optional[EventCategory] = None
    status: Optional[EventStatus] = None
    date: Optional[datetime] = None
    start_time: Optional[str] = Field(None, min_length=1, max_length=20)
    end_time: Optional[str] = Field(None, min_length=1, max_length=20)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)
    max_capacity: Optional[int] = Field(None, ge=1)

    model_config = {"str_strip_whitespace": True, "use_enum_values": True}


class EventResponse(BaseModel):
    """Event response schema."""
    id: int
    title: str
    description: str
    category: str
    status: str
    date: datetime
    start_time: str
    end_time: str
    location: str
    image_url: Optional[str] = None
    max_capacity: Optional[int] = None
    current_capacity: int
    spots_remaining: Optional[int] = None
    is_full: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class Pagination(BaseModel):
    """Pagination block for list responses."""
    current: int
    total: int
    has_next: bool
    has_prev: bool


class EventListResponse(BaseModel):
    """Response for event list."""
    events: List[EventResponse]
    pagination: Pagination


class EventStatsResponse(BaseModel):
    """Registration statistics for one event."""
    event_id: int
    max_capacity: Optional[int] = None
    current_capacity: int
    registration_count: int
    spots_remaining: Optional[int] = None


class RegistrationRequest(BaseModel):
    """
    Event registration form.

    Accepts the student number as ``externalId`` or ``external_id``.
    """
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    external_id: str = Field(..., alias="externalId", min_length=1, max_length=20)
    program: str = Field(..., min_length=1, max_length=100)
    year: int = Field(..., ge=1, le=4)

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True
    }

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        check_display_name(v)
        return v


class ParticipantBrief(BaseModel):
    """Brief participant info for registration responses."""
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    external_id: Optional[str] = None
    program: Optional[str] = None
    year: Optional[int] = None

    model_config = {
        "from_attributes": True
    }


class RegistrationResponse(BaseModel):
    """One registration with its participant."""
    id: int
    event_id: int
    user_id: int
    created_at: Optional[datetime] = None
    participant: ParticipantBrief


class RegistrationCreatedResponse(BaseModel):
    """Response for a successful registration."""
    message: str
    registration: RegistrationResponse


class CancellationResponse(BaseModel):
    """Response for an administrative cancellation."""
    message: str
    current_capacity: int
    spots_remaining: Optional[int] = None
