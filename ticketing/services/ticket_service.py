"""
Ticket tier service for the Ticketing Service.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ticketing.core.exceptions import NotFoundError, ValidationError
from ticketing.db.repositories import TicketRepository
from ticketing.models import Event, Ticket, User
from ticketing.schemas.ticket import TicketCreate, TicketUpdate
from ticketing.services.event_service import get_owned_event

logger = logging.getLogger(__name__)


class TicketService:
    """Manages ticket tiers. Mutations are restricted to the event owner."""

    async def list_event_tickets(self, session: Session, event_id: int) -> List[Ticket]:
        """
        Get the active tickets of an event, cheapest first.

        Raises:
            NotFoundError: If the event does not exist
        """
        if session.get(Event, event_id) is None:
            raise NotFoundError("Event not found")
        return TicketRepository(session).get_active_for_event(event_id)

    async def create_ticket(
        self, session: Session, organizer: User, event_id: int, ticket_data: TicketCreate
    ) -> Ticket:
        """Create a ticket tier on an event the organizer owns."""
        get_owned_event(session, event_id, organizer, "add tickets to this event")
        ticket = TicketRepository(session).create(event_id=event_id, **ticket_data.model_dump())
        logger.info(f"Ticket {ticket.id} created for event {event_id}")
        return ticket

    def _get_owned_ticket(self, session: Session, ticket_id: int, organizer: User, action: str) -> Ticket:
        ticket = session.get(Ticket, ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        get_owned_event(session, ticket.event_id, organizer, action)
        return ticket

    async def update_ticket(
        self, session: Session, organizer: User, ticket_id: int, ticket_data: TicketUpdate
    ) -> Ticket:
        """
        Update a ticket tier.

        Raises:
            ValidationError: If quantity_available would drop below quantity_sold
        """
        ticket = self._get_owned_ticket(session, ticket_id, organizer, "update this ticket")
        updates = ticket_data.model_dump(exclude_unset=True)

        new_available = updates.get("quantity_available")
        if new_available is not None and new_available < ticket.quantity_sold:
            raise ValidationError(
                f"Quantity available cannot be less than quantity sold ({ticket.quantity_sold})"
            )

        ticket = TicketRepository(session).update(ticket, **updates)
        logger.info(f"Ticket {ticket.id} updated by organizer {organizer.id}")
        return ticket

    async def delete_ticket(self, session: Session, organizer: User, ticket_id: int) -> bool:
        """
        Delete a ticket tier, or deactivate it if any were sold.

        Returns:
            True if deleted, False if deactivated
        """
        ticket = self._get_owned_ticket(session, ticket_id, organizer, "delete this ticket")
        repo = TicketRepository(session)

        if ticket.quantity_sold > 0:
            repo.update(ticket, is_active=False)
            logger.info(f"Ticket {ticket_id} deactivated, {ticket.quantity_sold} already sold")
            return False

        repo.delete(ticket)
        logger.info(f"Ticket {ticket_id} deleted by organizer {organizer.id}")
        return True


# Global ticket service instance
ticket_service = TicketService()
