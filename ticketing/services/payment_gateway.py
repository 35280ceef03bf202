"""
Payment gateway abstraction for the Ticketing Service.
Stripe Checkout in production, a local mock when Stripe is not configured.
"""

import asyncio
import json
import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import stripe

from ticketing.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutRequest:
    """Everything a gateway needs to start a hosted checkout."""
    booking_id: int
    event_id: int
    ticket_id: int
    quantity: int
    unit_amount: int
    product_name: str
    description: str
    success_url: str
    cancel_url: str


@dataclass
class CheckoutSession:
    session_id: str
    url: Optional[str] = None
    is_mock: bool = False


@dataclass
class WebhookEvent:
    type: str
    data: Dict[str, Any] = field(default_factory=dict)


def generate_mock_transaction_id() -> str:
    """Build a MOCK_{epoch_ms}_{random} transaction id."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"MOCK_{int(time.time() * 1000)}_{suffix}"


class PaymentGateway:
    """Interface implemented by every payment gateway."""

    is_mock = False

    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        raise NotImplementedError

    async def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        raise NotImplementedError


class MockPaymentGateway(PaymentGateway):
    """
    Gateway used when Stripe is unavailable.
    Issues synthetic transaction ids; the client confirms payment itself.
    """

    is_mock = True

    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        session_id = generate_mock_transaction_id()
        logger.info(f"Mock checkout session {session_id} created for booking {request.booking_id}")
        return CheckoutSession(session_id=session_id, url=None, is_mock=True)

    async def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        raise PaymentGatewayError("Webhooks are not supported in mock payment mode")


class StripePaymentGateway(PaymentGateway):
    """Stripe Checkout gateway."""

    def __init__(self, api_key: str, webhook_secret: Optional[str] = None, currency: str = "gbp"):
        stripe.api_key = api_key
        self.webhook_secret = webhook_secret
        self.currency = currency

    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        """
        Create a Stripe Checkout session for a pending booking.

        Raises:
            PaymentGatewayError: If Stripe rejects the request
        """
        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": request.product_name,
                            "description": request.description,
                        },
                        "unit_amount": request.unit_amount,
                    },
                    "quantity": request.quantity,
                }
            ],
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "metadata": {
                "booking_id": str(request.booking_id),
                "event_id": str(request.event_id),
                "ticket_id": str(request.ticket_id),
                "quantity": str(request.quantity),
            },
        }

        try:
            session = await asyncio.to_thread(stripe.checkout.Session.create, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for booking {request.booking_id}: {e}")
            raise PaymentGatewayError(str(e))

        logger.info(f"Stripe checkout session {session.id} created for booking {request.booking_id}")
        return CheckoutSession(session_id=session.id, url=session.url, is_mock=False)

    async def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """
        Verify a webhook signature and decode the event.

        Raises:
            PaymentGatewayError: If the secret is missing, the payload is malformed
                or the signature does not match
        """
        if not self.webhook_secret:
            raise PaymentGatewayError("Webhook secret is not configured")

        try:
            stripe.Webhook.construct_event(payload, signature or "", self.webhook_secret)
            # Verified; decode again as plain dicts
            body = json.loads(payload)
        except ValueError as e:
            raise PaymentGatewayError(f"Invalid payload: {e}")
        except stripe.SignatureVerificationError as e:
            raise PaymentGatewayError(f"Invalid signature: {e}")

        return WebhookEvent(type=body.get("type", ""), data=body.get("data", {}).get("object") or {})


def build_payment_gateway(payment_config: Dict[str, Any]) -> PaymentGateway:
    """
    Select a gateway from payment configuration.

    Args:
        payment_config: Output of TicketingConfig.get_payment_config()

    Returns:
        Stripe gateway when a secret key is configured, the mock gateway otherwise
    """
    api_key = payment_config.get("stripe_secret_key")
    if api_key:
        logger.info("Using Stripe payment gateway")
        return StripePaymentGateway(
            api_key=api_key,
            webhook_secret=payment_config.get("stripe_webhook_secret"),
            currency=payment_config.get("currency") or "gbp",
        )

    logger.warning("STRIPE_SECRET_KEY not configured, using mock payment gateway")
    return MockPaymentGateway()
