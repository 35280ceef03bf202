"""
Analytics service for organizer dashboards.
Aggregates revenue and ticket sales over completed bookings with SQL grouping.
"""

import logging
import math
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ticketing.models import Booking, CheckInStatus, Event, EventStatus, PaymentStatus, Ticket, User, utcnow
from ticketing.services.event_service import get_owned_event

logger = logging.getLogger(__name__)

SALES_WINDOW_DAYS = 30
TOP_EVENTS_LIMIT = 10
RECENT_BOOKINGS_LIMIT = 5


def _percent(part: float, whole: float) -> int:
    """Percentage rounded half up, 0 when whole is 0."""
    if not whole:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def _money(value) -> float:
    return round(float(value or 0), 2)


def _day(value) -> str:
    """Render a grouped booking day as YYYY-MM-DD."""
    return value if isinstance(value, str) else value.isoformat()


class AnalyticsService:
    """
    Analytics service for an organizer's events.
    Only completed bookings count towards revenue and sales.
    """

    def _sales_over_time(self, session: Session, *filters) -> List[Dict[str, Any]]:
        day = func.date(Booking.booking_date)
        rows = (
            session.query(
                day.label("day"),
                func.sum(Booking.total_amount),
                func.sum(Booking.quantity),
            )
            .filter(Booking.payment_status == PaymentStatus.COMPLETED, *filters)
            .group_by(day)
            .order_by(day.asc())
            .all()
        )
        return [
            {"date": _day(row_day), "revenue": _money(revenue), "tickets": int(tickets or 0)}
            for row_day, revenue, tickets in rows
        ]

    async def get_dashboard(self, session: Session, organizer: User) -> Dict[str, Any]:
        """
        Get dashboard statistics across all of an organizer's events.

        Returns:
            Overview totals, chart series and the most recent bookings
        """
        organizer_events = select(Event.id).where(Event.organizer_id == organizer.id)
        completed = (
            Booking.event_id.in_(organizer_events),
            Booking.payment_status == PaymentStatus.COMPLETED,
        )

        total_revenue, total_tickets, total_bookings = (
            session.query(
                func.coalesce(func.sum(Booking.total_amount), 0),
                func.coalesce(func.sum(Booking.quantity), 0),
                func.count(Booking.id),
            )
            .filter(*completed)
            .one()
        )

        now = utcnow()
        events = session.query(Event.status, Event.event_date).filter(Event.organizer_id == organizer.id).all()
        published = [e for e in events if e.status == EventStatus.PUBLISHED]
        upcoming = [e for e in published if e.event_date >= now]

        revenue = func.sum(Booking.total_amount)
        revenue_by_event = (
            session.query(Event.event_name, revenue, func.sum(Booking.quantity))
            .select_from(Booking)
            .join(Event, Booking.event_id == Event.id)
            .filter(*completed)
            .group_by(Event.id, Event.event_name)
            .order_by(revenue.desc())
            .limit(TOP_EVENTS_LIMIT)
            .all()
        )

        tickets_by_type = (
            session.query(Ticket.ticket_type, func.sum(Booking.quantity), func.sum(Booking.total_amount))
            .select_from(Booking)
            .join(Ticket, Booking.ticket_id == Ticket.id)
            .filter(*completed)
            .group_by(Ticket.ticket_type)
            .all()
        )

        window_start = now - timedelta(days=SALES_WINDOW_DAYS)
        sales_over_time = self._sales_over_time(
            session, Booking.event_id.in_(organizer_events), Booking.booking_date >= window_start
        )

        recent_bookings = (
            session.query(Booking)
            .filter(*completed)
            .order_by(Booking.booking_date.desc(), Booking.id.desc())
            .limit(RECENT_BOOKINGS_LIMIT)
            .all()
        )

        return {
            "overview": {
                "total_revenue": _money(total_revenue),
                "total_tickets_sold": int(total_tickets),
                "total_bookings": int(total_bookings),
                "total_events": len(events),
                "published_events": len(published),
                "upcoming_events": len(upcoming),
            },
            "charts": {
                "revenue_by_event": [
                    {"event_name": name, "revenue": _money(event_revenue), "tickets_sold": int(sold or 0)}
                    for name, event_revenue, sold in revenue_by_event
                ],
                "tickets_by_type": [
                    {"ticket_type": ticket_type, "count": int(count or 0), "revenue": _money(type_revenue)}
                    for ticket_type, count, type_revenue in tickets_by_type
                ],
                "sales_over_time": sales_over_time,
            },
            "recent_bookings": [
                {
                    "id": b.id,
                    "attendee_name": b.attendee.full_name if b.attendee else "Unknown",
                    "event_name": b.event.event_name if b.event else "Unknown",
                    "ticket_type": b.ticket.ticket_type if b.ticket else "Unknown",
                    "quantity": b.quantity,
                    "amount": _money(b.total_amount),
                    "date": b.booking_date,
                }
                for b in recent_bookings
            ],
        }

    async def get_event_analytics(self, session: Session, organizer: User, event_id: int) -> Dict[str, Any]:
        """
        Get sales and check-in analytics for one event.

        Raises:
            NotFoundError: If the event does not exist
            PermissionDeniedError: If the organizer does not own the event
        """
        event = get_owned_event(session, event_id, organizer, "view analytics")

        tickets = session.query(Ticket).filter(Ticket.event_id == event.id).order_by(Ticket.id.asc()).all()

        per_ticket = {
            ticket_id: (int(sold or 0), revenue)
            for ticket_id, sold, revenue in (
                session.query(Booking.ticket_id, func.sum(Booking.quantity), func.sum(Booking.total_amount))
                .filter(Booking.event_id == event.id, Booking.payment_status == PaymentStatus.COMPLETED)
                .group_by(Booking.ticket_id)
                .all()
            )
        }

        total_revenue, total_sold = (
            session.query(
                func.coalesce(func.sum(Booking.total_amount), 0),
                func.coalesce(func.sum(Booking.quantity), 0),
            )
            .filter(Booking.event_id == event.id, Booking.payment_status == PaymentStatus.COMPLETED)
            .one()
        )
        total_sold = int(total_sold)

        checked_in = (
            session.query(func.count(Booking.id))
            .filter(
                Booking.event_id == event.id,
                Booking.payment_status == PaymentStatus.COMPLETED,
                Booking.check_in_status == CheckInStatus.CHECKED_IN,
            )
            .scalar()
        )
        total_capacity = sum(t.quantity_available for t in tickets)

        return {
            "event": {
                "id": event.id,
                "event_name": event.event_name,
                "event_date": event.event_date,
                "status": event.status,
            },
            "overview": {
                "total_revenue": _money(total_revenue),
                "total_tickets_sold": total_sold,
                "total_capacity": total_capacity,
                "percentage_sold": _percent(total_sold, total_capacity),
                "checked_in": checked_in,
                "check_in_rate": _percent(checked_in, total_sold),
            },
            "sales_by_ticket": [
                {
                    "ticket_type": t.ticket_type,
                    "price": _money(t.price),
                    "available": t.quantity_available,
                    "sold": per_ticket.get(t.id, (0, 0))[0],
                    "revenue": _money(per_ticket.get(t.id, (0, 0))[1]),
                }
                for t in tickets
            ],
            "sales_over_time": self._sales_over_time(session, Booking.event_id == event.id),
        }


# Global analytics service instance
analytics_service = AnalyticsService()
