"""
Notification model for the Ticketing Service.
"""

from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, Index

from ticketing.models.base import Base, utcnow


class NotificationType(str, PyEnum):
    BOOKING_CONFIRMED = "booking_confirmed"
    EVENT_CANCELLED = "event_cancelled"
    EVENT_UPDATED = "event_updated"
    GENERAL = "general"


class Notification(Base):
    """
    In-app notification polled by the client.
    Only the read flag changes after creation.
    """

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message = Column(String(500), nullable=False)
    type = Column(Enum(NotificationType), default=NotificationType.GENERAL, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    related_event_id = Column(Integer, nullable=True)
    related_booking_id = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_notification_user_read_created', 'user_id', 'read', 'created_at'),
    )

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}', read={self.read})>"
