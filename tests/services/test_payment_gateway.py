"""
Tests for payment gateways.
The Stripe SDK is patched; no network calls are made.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import stripe

from ticketing.core.exceptions import PaymentGatewayError
from ticketing.services.payment_gateway import (
    CheckoutRequest, MockPaymentGateway, StripePaymentGateway, build_payment_gateway,
    generate_mock_transaction_id
)


@pytest.fixture
def checkout_request():
    return CheckoutRequest(
        booking_id=7,
        event_id=3,
        ticket_id=11,
        quantity=2,
        unit_amount=2550,
        product_name="Summer Music Festival - Standard",
        description="Standing area",
        success_url="http://localhost:5173/booking/success?session_id={CHECKOUT_SESSION_ID}&booking_id=7",
        cancel_url="http://localhost:5173/booking/cancel?booking_id=7",
    )


class TestMockPaymentGateway:
    """Test the mock gateway."""

    def test_transaction_id_format(self):
        transaction_id = generate_mock_transaction_id()
        prefix, millis, suffix = transaction_id.split("_")

        assert prefix == "MOCK"
        assert millis.isdigit()
        assert len(suffix) == 9

    @pytest.mark.asyncio
    async def test_checkout_has_no_url(self, checkout_request):
        session = await MockPaymentGateway().create_checkout_session(checkout_request)

        assert session.is_mock is True
        assert session.url is None
        assert session.session_id.startswith("MOCK_")

    @pytest.mark.asyncio
    async def test_rejects_webhooks(self):
        with pytest.raises(PaymentGatewayError):
            await MockPaymentGateway().construct_webhook_event(b"{}", "sig")


class TestStripePaymentGateway:
    """Test the Stripe Checkout gateway."""

    @pytest.mark.asyncio
    async def test_creates_checkout_session(self, checkout_request):
        gateway = StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_123", currency="gbp")
        stripe_session = MagicMock(id="cs_test_abc", url="https://checkout.stripe.com/c/pay/cs_test_abc")

        with patch("stripe.checkout.Session.create", return_value=stripe_session) as create:
            session = await gateway.create_checkout_session(checkout_request)

        assert session.session_id == "cs_test_abc"
        assert session.url == "https://checkout.stripe.com/c/pay/cs_test_abc"
        assert session.is_mock is False

        params = create.call_args.kwargs
        assert params["mode"] == "payment"
        assert params["line_items"][0]["quantity"] == 2
        assert params["line_items"][0]["price_data"]["unit_amount"] == 2550
        assert params["line_items"][0]["price_data"]["currency"] == "gbp"
        assert params["metadata"] == {"booking_id": "7", "event_id": "3", "ticket_id": "11", "quantity": "2"}
        assert params["success_url"] == checkout_request.success_url

    @pytest.mark.asyncio
    async def test_stripe_errors_are_wrapped(self, checkout_request):
        gateway = StripePaymentGateway(api_key="sk_test_123")

        with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("card network down")):
            with pytest.raises(PaymentGatewayError):
                await gateway.create_checkout_session(checkout_request)

    @pytest.mark.asyncio
    async def test_webhook_decodes_verified_event(self):
        gateway = StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_123")
        payload = json.dumps({
            "type": "checkout.session.completed",
            "data": {"object": {"metadata": {"booking_id": "7"}, "payment_intent": "pi_1"}},
        }).encode()

        with patch("stripe.Webhook.construct_event") as construct:
            event = await gateway.construct_webhook_event(payload, "t=1,v1=abc")

        construct.assert_called_once_with(payload, "t=1,v1=abc", "whsec_123")
        assert event.type == "checkout.session.completed"
        assert event.data["metadata"]["booking_id"] == "7"
        assert event.data["payment_intent"] == "pi_1"

    @pytest.mark.asyncio
    async def test_webhook_bad_signature(self):
        gateway = StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_123")
        error = stripe.SignatureVerificationError("No signatures found", "bad")

        with patch("stripe.Webhook.construct_event", side_effect=error):
            with pytest.raises(PaymentGatewayError, match="Invalid signature"):
                await gateway.construct_webhook_event(b"{}", "bad")

    @pytest.mark.asyncio
    async def test_webhook_bad_payload(self):
        gateway = StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_123")

        with patch("stripe.Webhook.construct_event", side_effect=ValueError("not json")):
            with pytest.raises(PaymentGatewayError, match="Invalid payload"):
                await gateway.construct_webhook_event(b"not json", "sig")

    @pytest.mark.asyncio
    async def test_webhook_requires_secret(self):
        gateway = StripePaymentGateway(api_key="sk_test_123")

        with pytest.raises(PaymentGatewayError, match="Webhook secret is not configured"):
            await gateway.construct_webhook_event(b"{}", "sig")


class TestBuildPaymentGateway:
    """Test gateway selection from configuration."""

    def test_stripe_when_key_configured(self):
        gateway = build_payment_gateway(
            {"stripe_secret_key": "sk_test_123", "stripe_webhook_secret": "whsec_1", "currency": "usd"}
        )

        assert isinstance(gateway, StripePaymentGateway)
        assert gateway.currency == "usd"
        assert gateway.webhook_secret == "whsec_1"

    def test_mock_without_key(self):
        gateway = build_payment_gateway({"stripe_secret_key": None})

        assert isinstance(gateway, MockPaymentGateway)
        assert gateway.is_mock is True
