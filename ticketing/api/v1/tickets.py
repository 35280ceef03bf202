"""
Ticket tier endpoints for the Ticketing Service.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ticketing.api.dependencies import get_current_organizer
from ticketing.db.database import get_db
from ticketing.models.user import User
from ticketing.schemas.ticket import TicketCreate, TicketResponse, TicketUpdate
from ticketing.services.ticket_service import ticket_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("/event/{event_id}")
async def get_event_tickets(event_id: int, db: Session = Depends(get_db)):
    """Get the active tickets of an event, cheapest first."""
    tickets = await ticket_service.list_event_tickets(db, event_id)
    return {"success": True, "data": [TicketResponse.model_validate(t) for t in tickets]}


@router.post("/event/{event_id}", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    event_id: int,
    ticket_data: TicketCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    ticket = await ticket_service.create_ticket(db, current_user, event_id, ticket_data)
    return {
        "success": True,
        "message": "Ticket created successfully",
        "data": TicketResponse.model_validate(ticket),
    }


@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: int,
    ticket_data: TicketUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    ticket = await ticket_service.update_ticket(db, current_user, ticket_id, ticket_data)
    return {
        "success": True,
        "message": "Ticket updated successfully",
        "data": TicketResponse.model_validate(ticket),
    }


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """Delete a ticket tier, or deactivate it when tickets were already sold."""
    deleted = await ticket_service.delete_ticket(db, current_user, ticket_id)
    if deleted:
        return {"success": True, "message": "Ticket deleted successfully"}
    return {"success": True, "message": "Ticket deactivated (cannot delete sold tickets)"}
