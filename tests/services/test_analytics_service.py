"""
Tests for AnalyticsService aggregations.
"""

from decimal import Decimal

import pytest

from ticketing.core.exceptions import NotFoundError, PermissionDeniedError
from ticketing.models import CheckInStatus, EventStatus, PaymentStatus, utcnow
from ticketing.services.analytics_service import _percent, analytics_service


@pytest.fixture
def sales(db_session, organizer, other_organizer, attendee, second_attendee,
          published_event, event_factory, ticket_factory, booking_factory):
    """Two paid bookings on one event, plus noise that must not be counted."""
    standard = ticket_factory(published_event, ticket_type="Standard", price=Decimal("25.00"), quantity_available=100)
    vip = ticket_factory(published_event, ticket_type="VIP", price=Decimal("100.00"), quantity_available=20)

    booking_factory(attendee, standard, quantity=2)
    booking_factory(second_attendee, vip, quantity=1, check_in_status=CheckInStatus.CHECKED_IN)
    booking_factory(attendee, vip, quantity=1, payment_status=PaymentStatus.PENDING)

    event_factory(organizer, event_name="Planning", status=EventStatus.DRAFT)
    foreign_ticket = ticket_factory(event_factory(other_organizer, event_name="Not Mine"), price=Decimal("500.00"))
    booking_factory(attendee, foreign_ticket, quantity=3)

    return {"standard": standard, "vip": vip}


class TestPercent:
    """Test percentage rounding."""

    def test_rounds_half_up(self):
        assert _percent(1, 8) == 13
        assert _percent(3, 120) == 3
        assert _percent(1, 3) == 33

    def test_zero_whole(self):
        assert _percent(5, 0) == 0


class TestEventAnalytics:
    """Test single event analytics."""

    @pytest.mark.asyncio
    async def test_overview(self, db_session, organizer, published_event, sales):
        data = await analytics_service.get_event_analytics(db_session, organizer, published_event.id)

        assert data["event"]["id"] == published_event.id
        assert data["overview"] == {
            "total_revenue": 150.0,
            "total_tickets_sold": 3,
            "total_capacity": 120,
            "percentage_sold": 3,
            "checked_in": 1,
            "check_in_rate": 33,
        }

    @pytest.mark.asyncio
    async def test_sales_by_ticket(self, db_session, organizer, published_event, sales):
        data = await analytics_service.get_event_analytics(db_session, organizer, published_event.id)

        assert data["sales_by_ticket"] == [
            {"ticket_type": "Standard", "price": 25.0, "available": 100, "sold": 2, "revenue": 50.0},
            {"ticket_type": "VIP", "price": 100.0, "available": 20, "sold": 1, "revenue": 100.0},
        ]

    @pytest.mark.asyncio
    async def test_sales_over_time_groups_by_day(self, db_session, organizer, published_event, sales):
        data = await analytics_service.get_event_analytics(db_session, organizer, published_event.id)

        assert data["sales_over_time"] == [
            {"date": utcnow().date().isoformat(), "revenue": 150.0, "tickets": 3}
        ]

    @pytest.mark.asyncio
    async def test_event_without_sales(self, db_session, organizer, published_event):
        data = await analytics_service.get_event_analytics(db_session, organizer, published_event.id)

        assert data["overview"]["total_revenue"] == 0.0
        assert data["overview"]["percentage_sold"] == 0
        assert data["overview"]["check_in_rate"] == 0
        assert data["sales_over_time"] == []

    @pytest.mark.asyncio
    async def test_requires_ownership(self, db_session, other_organizer, published_event):
        with pytest.raises(PermissionDeniedError, match="Not authorized to view analytics"):
            await analytics_service.get_event_analytics(db_session, other_organizer, published_event.id)

    @pytest.mark.asyncio
    async def test_missing_event(self, db_session, organizer):
        with pytest.raises(NotFoundError):
            await analytics_service.get_event_analytics(db_session, organizer, 999)


class TestDashboard:
    """Test organizer dashboard aggregation."""

    @pytest.mark.asyncio
    async def test_overview_counts_only_own_completed_bookings(self, db_session, organizer, sales):
        data = await analytics_service.get_dashboard(db_session, organizer)

        assert data["overview"] == {
            "total_revenue": 150.0,
            "total_tickets_sold": 3,
            "total_bookings": 2,
            "total_events": 2,
            "published_events": 1,
            "upcoming_events": 1,
        }

    @pytest.mark.asyncio
    async def test_charts(self, db_session, organizer, sales):
        data = await analytics_service.get_dashboard(db_session, organizer)
        charts = data["charts"]

        assert charts["revenue_by_event"] == [
            {"event_name": "Summer Music Festival", "revenue": 150.0, "tickets_sold": 3}
        ]
        assert sorted(charts["tickets_by_type"], key=lambda row: row["ticket_type"]) == [
            {"ticket_type": "Standard", "count": 2, "revenue": 50.0},
            {"ticket_type": "VIP", "count": 1, "revenue": 100.0},
        ]
        assert charts["sales_over_time"] == [
            {"date": utcnow().date().isoformat(), "revenue": 150.0, "tickets": 3}
        ]

    @pytest.mark.asyncio
    async def test_recent_bookings(self, db_session, organizer, attendee, second_attendee, sales):
        data = await analytics_service.get_dashboard(db_session, organizer)

        recent = data["recent_bookings"]
        assert len(recent) == 2
        assert {r["attendee_name"] for r in recent} == {attendee.full_name, second_attendee.full_name}
        assert all(r["event_name"] == "Summer Music Festival" for r in recent)

    @pytest.mark.asyncio
    async def test_empty_dashboard(self, db_session, organizer):
        data = await analytics_service.get_dashboard(db_session, organizer)

        assert data["overview"]["total_revenue"] == 0.0
        assert data["overview"]["total_events"] == 0
        assert data["charts"]["revenue_by_event"] == []
        assert data["recent_bookings"] == []
