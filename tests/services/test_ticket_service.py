"""
Tests for TicketService.
"""

from decimal import Decimal

import pytest

from ticketing.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ticketing.models import Ticket
from ticketing.schemas.ticket import TicketCreate, TicketUpdate
from ticketing.services.ticket_service import ticket_service


class TestTicketService:
    """Test ticket tier management."""

    @pytest.mark.asyncio
    async def test_list_active_tickets_cheapest_first(self, db_session, published_event, ticket_factory):
        ticket_factory(published_event, ticket_type="VIP", price=Decimal("120.00"))
        ticket_factory(published_event, ticket_type="Early Bird", price=Decimal("15.00"))
        ticket_factory(published_event, ticket_type="Retired", price=Decimal("1.00"), is_active=False)

        tickets = await ticket_service.list_event_tickets(db_session, published_event.id)

        assert [t.ticket_type for t in tickets] == ["Early Bird", "VIP"]

    @pytest.mark.asyncio
    async def test_list_for_missing_event(self, db_session):
        with pytest.raises(NotFoundError, match="Event not found"):
            await ticket_service.list_event_tickets(db_session, 999)

    @pytest.mark.asyncio
    async def test_create_ticket(self, db_session, published_event, organizer):
        ticket = await ticket_service.create_ticket(
            db_session,
            organizer,
            published_event.id,
            TicketCreate(ticket_type="Balcony", price=Decimal("42.50"), quantity_available=30),
        )

        assert ticket.event_id == published_event.id
        assert ticket.quantity_sold == 0
        assert ticket.is_active is True
        assert ticket.price == Decimal("42.50")

    @pytest.mark.asyncio
    async def test_create_ticket_requires_ownership(self, db_session, published_event, other_organizer):
        with pytest.raises(PermissionDeniedError, match="Not authorized to add tickets to this event"):
            await ticket_service.create_ticket(
                db_session,
                other_organizer,
                published_event.id,
                TicketCreate(ticket_type="Balcony", price=Decimal("10.00"), quantity_available=5),
            )

    @pytest.mark.asyncio
    async def test_update_cannot_drop_below_sold(self, db_session, organizer, ticket_factory, published_event):
        ticket = ticket_factory(published_event, quantity_available=10, quantity_sold=6)

        with pytest.raises(ValidationError):
            await ticket_service.update_ticket(db_session, organizer, ticket.id, TicketUpdate(quantity_available=5))

        updated = await ticket_service.update_ticket(
            db_session, organizer, ticket.id, TicketUpdate(quantity_available=6, price=Decimal("30.00"))
        )
        assert updated.quantity_available == 6
        assert updated.is_sold_out is True

    @pytest.mark.asyncio
    async def test_update_requires_ownership(self, db_session, other_organizer, paid_ticket):
        with pytest.raises(PermissionDeniedError):
            await ticket_service.update_ticket(db_session, other_organizer, paid_ticket.id, TicketUpdate(price=1))

    @pytest.mark.asyncio
    async def test_delete_unsold_ticket(self, db_session, organizer, paid_ticket):
        deleted = await ticket_service.delete_ticket(db_session, organizer, paid_ticket.id)

        assert deleted is True
        assert db_session.query(Ticket).count() == 0

    @pytest.mark.asyncio
    async def test_delete_sold_ticket_deactivates(self, db_session, organizer, attendee, paid_ticket, booking_factory):
        booking_factory(attendee, paid_ticket, quantity=2)

        deleted = await ticket_service.delete_ticket(db_session, organizer, paid_ticket.id)

        assert deleted is False
        db_session.expire_all()
        ticket = db_session.get(Ticket, paid_ticket.id)
        assert ticket.is_active is False
        assert ticket.quantity_sold == 2

    @pytest.mark.asyncio
    async def test_delete_missing_ticket(self, db_session, organizer):
        with pytest.raises(NotFoundError, match="Ticket not found"):
            await ticket_service.delete_ticket(db_session, organizer, 999)
