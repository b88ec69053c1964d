"""Tests for the Stripe gateway."""

import json
from unittest.mock import MagicMock, patch

from django.test import override_settings

import pytest
import stripe

from apps.web.payments.exceptions import (
    PaymentConfigurationError,
    PaymentProcessorError,
)
from apps.web.payments.services import StripeGateway
from apps.web.payments.tests.helpers import WEBHOOK_SECRET, sign_payload, stripe_event

LINE_ITEMS = [
    {
        "price_data": {
            "currency": "sar",
            "product_data": {"name": "Hummus"},
            "unit_amount": 1200,
        },
        "quantity": 2,
    }
]


class TestFromSettings:
    @override_settings(STRIPE_SECRET_KEY="sk_live_abc", STRIPE_WEBHOOK_SECRET="whsec_abc")
    def test_reads_keys(self):
        gateway = StripeGateway.from_settings()
        assert gateway.secret_key == "sk_live_abc"
        assert gateway.webhook_secret == "whsec_abc"
        assert gateway.is_configured

    @override_settings(STRIPE_SECRET_KEY="")
    def test_blank_key_is_not_configured(self):
        assert not StripeGateway.from_settings().is_configured


class TestCreateCheckoutSession:
    """Tests for StripeGateway.create_checkout_session."""

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_creates_session(self, mock_create):
        mock_create.return_value = MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/1")
        gateway = StripeGateway("sk_test_123")

        session = gateway.create_checkout_session(
            line_items=LINE_ITEMS,
            success_url="https://orders.example.com/al-bayt/menu?success=true",
            cancel_url="https://orders.example.com/al-bayt/menu?canceled=true",
            metadata={"restaurant_slug": "al-bayt", "items": "[]"},
        )

        assert session.id == "cs_test_1"
        mock_create.assert_called_once_with(
            api_key="sk_test_123",
            payment_method_types=["card"],
            line_items=LINE_ITEMS,
            mode="payment",
            success_url="https://orders.example.com/al-bayt/menu?success=true",
            cancel_url="https://orders.example.com/al-bayt/menu?canceled=true",
            metadata={"restaurant_slug": "al-bayt", "items": "[]"},
            phone_number_collection={"enabled": True},
        )

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_unconfigured_gateway_never_calls_stripe(self, mock_create):
        gateway = StripeGateway("")

        with pytest.raises(PaymentConfigurationError) as exc_info:
            gateway.create_checkout_session(LINE_ITEMS, "s", "c", {})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Stripe is not configured."
        mock_create.assert_not_called()

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_stripe_error_becomes_processor_error(self, mock_create):
        mock_create.side_effect = stripe.APIConnectionError("Network unreachable")
        gateway = StripeGateway("sk_test_123")

        with pytest.raises(PaymentProcessorError) as exc_info:
            gateway.create_checkout_session(LINE_ITEMS, "s", "c", {})

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Network unreachable"
        assert isinstance(exc_info.value.__cause__, stripe.APIConnectionError)

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_card_error_keeps_processor_code(self, mock_create):
        mock_create.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined"
        )
        gateway = StripeGateway("sk_test_123")

        with pytest.raises(PaymentProcessorError) as exc_info:
            gateway.create_checkout_session(LINE_ITEMS, "s", "c", {})

        assert exc_info.value.processor_code == "card_declined"


class TestVerifyWebhook:
    """Tests for StripeGateway.verify_webhook (real signatures)."""

    def test_valid_signature_returns_event(self):
        gateway = StripeGateway("sk_test_123", WEBHOOK_SECRET)
        payload = stripe_event("checkout.session.expired", {"id": "cs_test_1"})

        event = gateway.verify_webhook(payload, sign_payload(payload))

        assert event == json.loads(payload)
        assert event["data"]["object"]["id"] == "cs_test_1"

    def test_wrong_secret_rejected(self):
        gateway = StripeGateway("sk_test_123", WEBHOOK_SECRET)
        payload = stripe_event("checkout.session.expired", {"id": "cs_test_1"})

        with pytest.raises(stripe.SignatureVerificationError):
            gateway.verify_webhook(payload, sign_payload(payload, secret="whsec_other"))

    def test_tampered_payload_rejected(self):
        gateway = StripeGateway("sk_test_123", WEBHOOK_SECRET)
        payload = stripe_event("checkout.session.expired", {"id": "cs_test_1"})
        header = sign_payload(payload)

        with pytest.raises(stripe.SignatureVerificationError):
            gateway.verify_webhook(payload.replace(b"cs_test_1", b"cs_test_2"), header)

    def test_stale_timestamp_rejected(self):
        gateway = StripeGateway("sk_test_123", WEBHOOK_SECRET)
        payload = stripe_event("checkout.session.expired", {"id": "cs_test_1"})

        with pytest.raises(stripe.SignatureVerificationError):
            gateway.verify_webhook(payload, sign_payload(payload, timestamp=1_000_000))
