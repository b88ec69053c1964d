"""Payments module - Stripe checkout and webhook reconciliation."""

from apps.web.payments.exceptions import (
    CheckoutValidationError,
    PaymentConfigurationError,
    PaymentError,
    PaymentProcessorError,
)
from apps.web.payments.services import StripeGateway

__all__ = [
    "CheckoutValidationError",
    "PaymentConfigurationError",
    "PaymentError",
    "PaymentProcessorError",
    "StripeGateway",
]
