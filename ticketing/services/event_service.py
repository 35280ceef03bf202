"""
Event service for the Ticketing Service.
Handles public listing with filters, organizer CRUD and change notifications.
"""

import logging
import math
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ticketing.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from ticketing.db.repositories import BookingRepository, EventRepository, TicketRepository
from ticketing.models import Event, EventCategory, EventStatus, Ticket, User, utcnow
from ticketing.schemas.event import EventCreate, EventUpdate, EventResponse
from ticketing.services.notification_service import NotificationService, notification_service

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": Event.event_date,
    "name": Event.event_name,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_owned_event(session: Session, event_id: int, organizer: User, action: str) -> Event:
    """
    Load an event and check the organizer owns it.

    Args:
        session: Database session
        event_id: Event to load
        organizer: Acting user
        action: Verb used in the permission error message

    Raises:
        NotFoundError: If the event does not exist
        PermissionDeniedError: If the user does not own the event
    """
    event = session.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    if event.organizer_id != organizer.id:
        logger.warning(f"User {organizer.id} denied {action} on event {event_id}")
        raise PermissionDeniedError(f"Not authorized to {action}")
    return event


class EventService:
    """
    Event service for listing, creating, updating and deleting events.
    """

    def __init__(self, notifications: NotificationService):
        self.notifications = notifications

    def _to_response(self, event: Event, price_ranges: Dict[int, Tuple[float, float]]) -> EventResponse:
        low, high = price_ranges.get(event.id, (None, None))
        return EventResponse.model_validate(event).model_copy(update={"min_price": low, "max_price": high})

    async def list_events(
        self,
        session: Session,
        search: Optional[str] = None,
        category: Optional[EventCategory] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
        status: Optional[EventStatus] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "date",
        sort_order: str = "asc",
    ) -> Tuple[List[EventResponse], Dict[str, Any]]:
        """
        List events matching the given filters.

        Without a date range only future events are returned. Sorting by
        price loads the full filtered set, since prices live on tickets.

        Returns:
            Page of enriched events and pagination metadata
        """
        query = session.query(Event).filter(Event.status == (status or EventStatus.PUBLISHED))

        if search:
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(
                or_(
                    Event.event_name.ilike(pattern, escape="\\"),
                    Event.description.ilike(pattern, escape="\\"),
                    Event.venue.ilike(pattern, escape="\\"),
                )
            )

        if category:
            query = query.filter(Event.category == category)

        if date_from or date_to:
            if date_from:
                query = query.filter(Event.event_date >= datetime.combine(date_from, time.min))
            if date_to:
                query = query.filter(Event.event_date <= datetime.combine(date_to, time.max))
        else:
            query = query.filter(Event.event_date >= utcnow())

        if price_min is not None or price_max is not None:
            priced_events = select(Ticket.event_id).where(Ticket.is_active.is_(True))
            if price_min is not None:
                priced_events = priced_events.where(Ticket.price >= price_min)
            if price_max is not None:
                priced_events = priced_events.where(Ticket.price <= price_max)
            query = query.filter(Event.id.in_(priced_events))

        total = query.count()
        offset = (page - 1) * limit
        ticket_repo = TicketRepository(session)
        descending = sort_order == "desc"

        if sort_by == "price":
            events = query.all()
            price_ranges = ticket_repo.get_price_ranges(e.id for e in events)
            priced = [e for e in events if e.id in price_ranges]
            unpriced = [e for e in events if e.id not in price_ranges]
            priced.sort(key=lambda e: price_ranges[e.id][0], reverse=descending)
            page_events = (priced + unpriced)[offset:offset + limit]
        else:
            column = SORT_COLUMNS.get(sort_by, Event.event_date)
            ordering = column.desc() if descending else column.asc()
            page_events = query.order_by(ordering, Event.id.asc()).offset(offset).limit(limit).all()
            price_ranges = ticket_repo.get_price_ranges(e.id for e in page_events)

        total_pages = math.ceil(total / limit) if total else 0
        pagination = {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": total_pages,
            "has_next_page": page < total_pages,
            "has_prev_page": page > 1,
        }
        return [self._to_response(e, price_ranges) for e in page_events], pagination

    async def get_event(self, session: Session, event_id: int) -> EventResponse:
        """
        Get a single event with its price range.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = session.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return self._to_response(event, TicketRepository(session).get_price_ranges([event.id]))

    async def get_organizer_events(self, session: Session, organizer: User) -> List[EventResponse]:
        """Get all events of an organizer, newest first."""
        events = EventRepository(session).get_by_organizer(organizer.id)
        price_ranges = TicketRepository(session).get_price_ranges(e.id for e in events)
        return [self._to_response(e, price_ranges) for e in events]

    async def create_event(self, session: Session, organizer: User, event_data: EventCreate) -> EventResponse:
        """Create an event owned by the organizer."""
        fields = event_data.model_dump()
        fields["event_image"] = fields.get("event_image") or ""
        event = EventRepository(session).create(organizer_id=organizer.id, **fields)
        logger.info(f"Event {event.id} created by organizer {organizer.id}")
        return self._to_response(event, {})

    async def update_event(
        self, session: Session, organizer: User, event_id: int, event_data: EventUpdate
    ) -> EventResponse:
        """
        Update an event and notify its attendees.

        Attendees receive an event_cancelled notification when this update
        cancels the event, an event_updated notification otherwise.

        Raises:
            NotFoundError: If the event does not exist
            PermissionDeniedError: If the organizer does not own the event
        """
        event = get_owned_event(session, event_id, organizer, "update this event")
        updates = event_data.model_dump(exclude_unset=True)
        if "event_image" in updates and updates["event_image"] is None:
            updates["event_image"] = ""

        was_cancelled = event.status == EventStatus.CANCELLED
        event = EventRepository(session).update(event, **updates)
        is_cancelling = event.status == EventStatus.CANCELLED and not was_cancelled

        if is_cancelling:
            logger.info(f"Event {event.id} cancelled by organizer {organizer.id}")
        await self.notifications.notify_event_attendees(session, event, cancelled=is_cancelling)

        return self._to_response(event, TicketRepository(session).get_price_ranges([event.id]))

    async def delete_event(self, session: Session, organizer: User, event_id: int) -> None:
        """
        Delete an event together with its tickets and unpaid bookings.

        Raises:
            ConflictError: If the event has completed bookings
        """
        event = get_owned_event(session, event_id, organizer, "delete this event")
        if BookingRepository(session).count_completed_for_event(event.id):
            raise ConflictError("Cannot delete an event with completed bookings, cancel it instead")
        EventRepository(session).delete(event)
        logger.info(f"Event {event_id} deleted by organizer {organizer.id}")


# Global event service instance
event_service = EventService(notification_service)
