"""
Payment services - Stripe integration.

StripeGateway is constructed once per process (see container.py) and passed
to the services that need it; nothing here touches module-level Stripe state.
"""

import json
import logging
from typing import Any

from django.conf import settings

import stripe

from apps.web.payments.exceptions import (
    PaymentConfigurationError,
    PaymentProcessorError,
)

logger = logging.getLogger(__name__)


class StripeGateway:
    """
    Thin wrapper over the Stripe SDK.

    Args:
        secret_key: Stripe secret API key (blank = not configured)
        webhook_secret: Signing secret for webhook verification (blank = not configured)
    """

    def __init__(self, secret_key: str, webhook_secret: str = "") -> None:
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret

    @classmethod
    def from_settings(cls) -> "StripeGateway":
        return cls(
            secret_key=getattr(settings, "STRIPE_SECRET_KEY", ""),
            webhook_secret=getattr(settings, "STRIPE_WEBHOOK_SECRET", ""),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def create_checkout_session(
        self,
        line_items: list[dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> stripe.checkout.Session:
        """
        Create a hosted Checkout Session.

        Args:
            line_items: Stripe line items with price_data in minor units
            success_url: Redirect after payment
            cancel_url: Redirect when the shopper abandons checkout
            metadata: String metadata echoed back in webhooks

        Returns:
            stripe.checkout.Session with id and hosted url

        Raises:
            PaymentConfigurationError: If no secret key is configured
            PaymentProcessorError: If the Stripe API call fails
        """
        if not self.is_configured:
            logger.error("Stripe Error: STRIPE_SECRET_KEY is missing.")
            raise PaymentConfigurationError("Stripe is not configured.")

        try:
            return stripe.checkout.Session.create(
                api_key=self.secret_key,
                payment_method_types=["card"],
                line_items=line_items,
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
                phone_number_collection={"enabled": True},
            )
        except stripe.StripeError as e:
            logger.warning("Stripe checkout error: %s", e)
            raise PaymentProcessorError(
                message=str(e.user_message or e),
                processor_code=getattr(e, "code", None),
            ) from e

    def verify_webhook(self, payload: bytes, signature: str) -> dict[str, Any]:
        """
        Verify a webhook signature and decode the event.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            The event as a plain dict

        Raises:
            stripe.SignatureVerificationError: If the signature does not match
            ValueError: If the payload is not valid JSON
        """
        stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        event: dict[str, Any] = json.loads(payload)
        return event
