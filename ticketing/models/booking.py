"""
Booking model for the Ticketing Service.
Tracks payment and check-in state of a ticket purchase.
"""

from enum import Enum as PyEnum

from sqlalchemy import (
    Column, Integer, String, DateTime, Enum, Numeric, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ticketing.models.base import Base, utcnow


class PaymentStatus(str, PyEnum):
    """Payment status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class CheckInStatus(str, PyEnum):
    NOT_CHECKED_IN = "not_checked_in"
    CHECKED_IN = "checked_in"


class Booking(Base):
    """
    Booking of one ticket tier by an attendee.

    Created pending, completed through the free, mock or Stripe payment
    paths. Only the event organizer may toggle check-in, and only once paid.
    """

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    attendee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)

    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)
    check_in_status = Column(Enum(CheckInStatus), default=CheckInStatus.NOT_CHECKED_IN, nullable=False)
    transaction_id = Column(String(255), nullable=True)

    booking_date = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    attendee = relationship("User")
    event = relationship("Event", back_populates="bookings")
    ticket = relationship("Ticket", back_populates="bookings")

    __table_args__ = (
        CheckConstraint('quantity >= 1 AND quantity <= 10', name='check_booking_quantity_range'),
        CheckConstraint('total_amount >= 0', name='check_booking_total_amount_non_negative'),
        Index('idx_booking_attendee_date', 'attendee_id', 'booking_date'),
        Index('idx_booking_event_payment', 'event_id', 'payment_status'),
        Index('idx_booking_transaction', 'transaction_id'),
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, attendee_id={self.attendee_id}, payment_status='{self.payment_status}')>"

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_status == CheckInStatus.CHECKED_IN
