"""
Pydantic schemas for Event-related operations.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ticketing.models.event import EventStatus, EventCategory

TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"


def _normalize_event_date(value: datetime) -> datetime:
    """Convert to naive UTC and reject dates before today."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    if value.date() < datetime.now(timezone.utc).date():
        raise ValueError('Event date must be in the future')
    return value


class EventCreate(BaseModel):
    """Schema for creating a new event."""
    event_name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10, max_length=5000)
    event_date: datetime
    event_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    venue: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    category: EventCategory
    event_image: Optional[str] = Field(None, max_length=500)
    capacity: int = Field(..., gt=0, le=100000)
    status: EventStatus = EventStatus.DRAFT

    @field_validator('event_date')
    @classmethod
    def validate_event_date(cls, v):
        return _normalize_event_date(v)


class EventUpdate(BaseModel):
    """Schema for updating an event. Every field is optional."""
    event_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=5000)
    event_date: Optional[datetime] = None
    event_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    venue: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    category: Optional[EventCategory] = None
    event_image: Optional[str] = Field(None, max_length=500)
    capacity: Optional[int] = Field(None, gt=0, le=100000)
    status: Optional[EventStatus] = None

    @field_validator(
        'event_name', 'description', 'event_date', 'event_time',
        'venue', 'category', 'capacity', 'status', mode='before'
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

    @field_validator('event_date')
    @classmethod
    def validate_event_date(cls, v):
        return _normalize_event_date(v)


class EventResponse(BaseModel):
    """Schema for event response, enriched with active ticket price range."""
    id: int
    organizer_id: int
    event_name: str
    description: str
    event_date: datetime
    event_time: str
    end_time: Optional[str] = None
    venue: str
    address: Optional[str] = None
    category: EventCategory
    event_image: str = ""
    capacity: int
    status: EventStatus
    is_upcoming: bool
    is_past: bool
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
