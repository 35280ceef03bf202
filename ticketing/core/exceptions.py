"""
Domain exceptions for the Ticketing Service.
Each error carries the HTTP status it maps to at the API boundary.
"""

from typing import Any, Dict, Optional


class TicketingError(Exception):
    """Base class for errors raised by ticketing services."""

    status_code = 400
    error_code = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TicketingError):
    """Request is well-formed but violates a business rule."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthenticationError(TicketingError):
    """Credentials are missing or wrong."""

    status_code = 401
    error_code = "AUTHENTICATION_ERROR"


class PermissionDeniedError(TicketingError):
    """Authenticated user may not act on the resource."""

    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(TicketingError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(TicketingError):
    """State changed underneath the request, e.g. tickets sold out."""

    status_code = 409
    error_code = "CONFLICT"


class PaymentGatewayError(TicketingError):
    """Payment provider call failed."""

    status_code = 502
    error_code = "PAYMENT_GATEWAY_ERROR"
