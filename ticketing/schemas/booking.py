"""
Pydantic schemas for Booking-related operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ticketing.models.booking import PaymentStatus, CheckInStatus
from ticketing.models.event import EventCategory, EventStatus


class BookingCreate(BaseModel):
    """Schema for creating a new booking."""
    event_id: int = Field(..., gt=0, description="Event ID must be positive")
    ticket_id: int = Field(..., gt=0, description="Ticket ID must be positive")
    quantity: int = Field(..., ge=1, le=10, description="Cannot book more than 10 tickets at once")


class PaymentConfirm(BaseModel):
    """Schema for client-driven payment confirmation."""
    transaction_id: Optional[str] = Field(None, max_length=255)


class BookingResponse(BaseModel):
    """Schema for booking response."""
    id: int
    attendee_id: int
    event_id: int
    ticket_id: int
    quantity: int
    total_amount: float
    payment_status: PaymentStatus
    check_in_status: CheckInStatus
    transaction_id: Optional[str] = None
    booking_date: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingEventSummary(BaseModel):
    """Event details embedded in an attendee's booking list."""
    id: int
    event_name: str
    event_date: datetime
    event_time: str
    venue: str
    event_image: str = ""
    category: EventCategory
    status: EventStatus

    class Config:
        from_attributes = True


class BookingTicketSummary(BaseModel):
    id: int
    ticket_type: str
    price: float

    class Config:
        from_attributes = True


class MyBookingResponse(BookingResponse):
    """Booking with its event and ticket details."""
    event: Optional[BookingEventSummary] = None
    ticket: Optional[BookingTicketSummary] = None


class AttendeeInfo(BaseModel):
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True


class AttendeeResponse(BaseModel):
    """Entry of an event's attendee roster."""
    id: int
    attendee: Optional[AttendeeInfo] = None
    ticket_type: Optional[str] = None
    quantity: int
    total_amount: float
    booking_date: datetime
    payment_status: PaymentStatus
    check_in_status: CheckInStatus
