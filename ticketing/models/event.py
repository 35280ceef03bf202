"""
Event model for the Ticketing Service.
"""

from enum import Enum as PyEnum

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Enum, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ticketing.models.base import Base, utcnow


class EventStatus(str, PyEnum):
    """Event lifecycle status, driven by the organizer."""
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class EventCategory(str, PyEnum):
    MUSIC = "music"
    SPORTS = "sports"
    ARTS = "arts"
    BUSINESS = "business"
    FOOD = "food"
    HEALTH = "health"
    TECH = "tech"
    OTHER = "other"


class Event(Base):
    """
    Event owned by exactly one organizer.
    Tickets and bookings are removed together with the event.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    event_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(DateTime, nullable=False, index=True)
    event_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=True)
    venue = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    category = Column(Enum(EventCategory), nullable=False, index=True)
    event_image = Column(String(500), default="", nullable=False)
    capacity = Column(Integer, nullable=False)
    status = Column(Enum(EventStatus), default=EventStatus.DRAFT, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    organizer = relationship("User")
    tickets = relationship("Ticket", back_populates="event", cascade="all, delete")
    bookings = relationship("Booking", back_populates="event", cascade="all, delete")

    __table_args__ = (
        CheckConstraint('capacity >= 1 AND capacity <= 100000', name='check_event_capacity_range'),
        Index('idx_event_status_date', 'status', 'event_date'),
        Index('idx_event_category_status', 'category', 'status'),
    )

    def __repr__(self):
        return f"<Event(id={self.id}, event_name='{self.event_name}', status='{self.status}')>"

    @property
    def is_past(self) -> bool:
        """Check if the event date has already passed."""
        return self.event_date < utcnow()

    @property
    def is_upcoming(self) -> bool:
        """Check if the event is still ahead."""
        return self.event_date >= utcnow()
