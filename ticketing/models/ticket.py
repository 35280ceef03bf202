"""
Ticket tier model for the Ticketing Service.
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ticketing.models.base import Base, utcnow


class Ticket(Base):
    """
    Ticket tier of an event.

    quantity_sold is only ever incremented by the booking flow and is
    bounded by quantity_available at the database level.
    """

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    ticket_type = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False)
    quantity_sold = Column(Integer, default=0, nullable=False)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    event = relationship("Event", back_populates="tickets")
    bookings = relationship("Booking", back_populates="ticket", cascade="all, delete")

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_ticket_price_non_negative'),
        CheckConstraint('quantity_available >= 1', name='check_ticket_quantity_available_positive'),
        CheckConstraint('quantity_sold >= 0', name='check_ticket_quantity_sold_non_negative'),
        CheckConstraint('quantity_sold <= quantity_available', name='check_ticket_not_oversold'),
        Index('idx_ticket_event_active', 'event_id', 'is_active'),
    )

    def __repr__(self):
        return f"<Ticket(id={self.id}, event_id={self.event_id}, ticket_type='{self.ticket_type}')>"

    @property
    def remaining_quantity(self) -> int:
        """Number of tickets still on sale."""
        return (self.quantity_available or 0) - (self.quantity_sold or 0)

    @property
    def is_sold_out(self) -> bool:
        return (self.quantity_sold or 0) >= (self.quantity_available or 0)
