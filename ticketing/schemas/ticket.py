"""
Pydantic schemas for ticket tiers.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TicketCreate(BaseModel):
    """Schema for creating a ticket tier."""
    ticket_type: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, le=10000, decimal_places=2)
    quantity_available: int = Field(..., gt=0, le=100000)
    description: Optional[str] = Field(None, max_length=500)


class TicketUpdate(BaseModel):
    """Schema for updating a ticket tier. Every field is optional."""
    ticket_type: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, le=10000, decimal_places=2)
    quantity_available: Optional[int] = Field(None, gt=0, le=100000)
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator('ticket_type', 'price', 'quantity_available', 'is_active', mode='before')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v


class TicketResponse(BaseModel):
    """Schema for ticket response with computed availability."""
    id: int
    event_id: int
    ticket_type: str
    price: float
    quantity_available: int
    quantity_sold: int
    description: Optional[str] = None
    is_active: bool
    remaining_quantity: int
    is_sold_out: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
