"""
SQLAlchemy models for the Ticketing Service.
Importing this package registers every mapper on the shared Base.
"""

from ticketing.models.base import Base, utcnow
from ticketing.models.user import User, UserType
from ticketing.models.event import Event, EventStatus, EventCategory
from ticketing.models.ticket import Ticket
from ticketing.models.booking import Booking, PaymentStatus, CheckInStatus
from ticketing.models.notification import Notification, NotificationType

__all__ = [
    'Base',
    'utcnow',
    'User',
    'UserType',
    'Event',
    'EventStatus',
    'EventCategory',
    'Ticket',
    'Booking',
    'PaymentStatus',
    'CheckInStatus',
    'Notification',
    'NotificationType',
]
