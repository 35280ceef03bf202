"""
Repositories for Ticketing Service models.
Encapsulate query composition and the conditional updates used by the booking flow.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, joinedload

from ticketing.models import (
    Booking, Event, Notification, PaymentStatus, Ticket, User, utcnow
)

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base repository class following Repository pattern.
    Provides common CRUD operations for all entities.
    """

    def __init__(self, session: Session, model_class):
        self.session = session
        self.model_class = model_class

    def create(self, **kwargs):
        """Create a new entity."""
        entity = self.model_class(**kwargs)
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def get_by_id(self, entity_id: int):
        """Get entity by ID."""
        return self.session.get(self.model_class, entity_id)

    def update(self, entity, **kwargs):
        """Apply field updates to an entity and commit."""
        for key, value in kwargs.items():
            setattr(entity, key, value)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        """Delete an entity."""
        self.session.delete(entity)
        self.session.commit()


class UserRepository(BaseRepository):
    """User repository for user-related database operations."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitively."""
        return self.session.query(User).filter(User.email == email.lower()).first()


class EventRepository(BaseRepository):
    """Repository for Event model operations."""

    def __init__(self, session: Session):
        super().__init__(session, Event)

    def get_by_organizer(self, organizer_id: int) -> List[Event]:
        """Get an organizer's events, newest first."""
        return (
            self.session.query(Event)
            .filter(Event.organizer_id == organizer_id)
            .order_by(Event.created_at.desc(), Event.id.desc())
            .all()
        )


class TicketRepository(BaseRepository):
    """Repository for ticket tiers."""

    def __init__(self, session: Session):
        super().__init__(session, Ticket)

    def get_active_for_event(self, event_id: int) -> List[Ticket]:
        """Get active tickets of an event ordered by price ascending."""
        return (
            self.session.query(Ticket)
            .filter(Ticket.event_id == event_id, Ticket.is_active.is_(True))
            .order_by(Ticket.price.asc(), Ticket.id.asc())
            .all()
        )

    def get_price_ranges(self, event_ids: Iterable[int]) -> Dict[int, Tuple[float, float]]:
        """
        Get the min and max active ticket price per event.

        Args:
            event_ids: Events to look up

        Returns:
            Mapping of event id to (min_price, max_price). Events without
            active tickets are absent.
        """
        event_ids = list(event_ids)
        if not event_ids:
            return {}

        rows = (
            self.session.query(Ticket.event_id, func.min(Ticket.price), func.max(Ticket.price))
            .filter(Ticket.event_id.in_(event_ids), Ticket.is_active.is_(True))
            .group_by(Ticket.event_id)
            .all()
        )
        return {event_id: (float(low), float(high)) for event_id, low, high in rows}

    def increment_sold(self, ticket_id: int, quantity: int) -> bool:
        """
        Atomically add to quantity_sold without exceeding quantity_available.
        Does not commit; the caller owns the transaction.

        Returns:
            True if the ticket had enough remaining quantity
        """
        updated = (
            self.session.query(Ticket)
            .filter(
                and_(
                    Ticket.id == ticket_id,
                    Ticket.quantity_sold + quantity <= Ticket.quantity_available,
                )
            )
            .update(
                {
                    Ticket.quantity_sold: Ticket.quantity_sold + quantity,
                    Ticket.updated_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        return updated > 0


class BookingRepository(BaseRepository):
    """Repository for bookings."""

    def __init__(self, session: Session):
        super().__init__(session, Booking)

    def mark_completed(self, booking_id: int, transaction_id: Optional[str] = None) -> bool:
        """
        Move a booking from pending to completed.
        Does not commit; the caller owns the transaction.

        Returns:
            True if this call performed the transition
        """
        values = {
            Booking.payment_status: PaymentStatus.COMPLETED,
            Booking.updated_at: utcnow(),
        }
        if transaction_id:
            values[Booking.transaction_id] = transaction_id

        updated = (
            self.session.query(Booking)
            .filter(Booking.id == booking_id, Booking.payment_status == PaymentStatus.PENDING)
            .update(values, synchronize_session=False)
        )
        return updated > 0

    def mark_failed(self, booking_id: int) -> bool:
        """Move a pending booking to failed. Does not commit."""
        updated = (
            self.session.query(Booking)
            .filter(Booking.id == booking_id, Booking.payment_status == PaymentStatus.PENDING)
            .update(
                {Booking.payment_status: PaymentStatus.FAILED, Booking.updated_at: utcnow()},
                synchronize_session=False,
            )
        )
        return updated > 0

    def get_for_attendee(
        self,
        attendee_id: int,
        payment_status: Optional[PaymentStatus] = None,
        upcoming: Optional[bool] = None,
    ) -> List[Booking]:
        """Get an attendee's bookings with event and ticket loaded, newest first."""
        query = (
            self.session.query(Booking)
            .options(joinedload(Booking.event), joinedload(Booking.ticket))
            .filter(Booking.attendee_id == attendee_id)
        )
        if payment_status is not None:
            query = query.filter(Booking.payment_status == payment_status)
        if upcoming is not None:
            now = utcnow()
            query = query.join(Event, Booking.event_id == Event.id)
            if upcoming:
                query = query.filter(Event.event_date >= now)
            else:
                query = query.filter(Event.event_date < now)

        return query.order_by(Booking.booking_date.desc(), Booking.id.desc()).all()

    def get_completed_for_event(self, event_id: int) -> List[Booking]:
        """Get paid bookings of an event with attendee and ticket loaded, newest first."""
        return (
            self.session.query(Booking)
            .options(joinedload(Booking.attendee), joinedload(Booking.ticket))
            .filter(Booking.event_id == event_id, Booking.payment_status == PaymentStatus.COMPLETED)
            .order_by(Booking.booking_date.desc(), Booking.id.desc())
            .all()
        )

    def count_completed_for_event(self, event_id: int) -> int:
        return (
            self.session.query(Booking)
            .filter(Booking.event_id == event_id, Booking.payment_status == PaymentStatus.COMPLETED)
            .count()
        )

    def get_attendee_ids(self, event_id: int) -> List[int]:
        """Get distinct attendees holding a completed booking for an event."""
        rows = self.session.execute(
            select(Booking.attendee_id)
            .where(Booking.event_id == event_id, Booking.payment_status == PaymentStatus.COMPLETED)
            .distinct()
        ).all()
        return [row[0] for row in rows]


class NotificationRepository(BaseRepository):
    """Repository for in-app notifications."""

    def __init__(self, session: Session):
        super().__init__(session, Notification)

    def get_latest_for_user(self, user_id: int, limit: int = 50) -> List[Notification]:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .scalar()
        )

    def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification of a user as read and commit."""
        updated = (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated
