"""
Payment service wiring.

Services are built once per process from settings and handed to the views
through as_view(); tests construct their own instances instead.
"""

from dataclasses import dataclass
from functools import cache

from django.conf import settings

from apps.web.core.tenants import resolve_tenant
from apps.web.payments.checkout import CheckoutSessionBuilder
from apps.web.payments.events import PaymentEventLogger
from apps.web.payments.reconciler import WebhookReconciler
from apps.web.payments.services import StripeGateway
from apps.web.restaurant.catalog import default_catalog


@dataclass(frozen=True)
class PaymentServices:
    gateway: StripeGateway
    event_logger: PaymentEventLogger
    checkout_builder: CheckoutSessionBuilder
    reconciler: WebhookReconciler


def build_payment_services() -> PaymentServices:
    """Build the payment services from Django settings."""
    currency = settings.PAYMENT_CURRENCY
    gateway = StripeGateway.from_settings()
    event_logger = PaymentEventLogger(default_currency=currency)

    return PaymentServices(
        gateway=gateway,
        event_logger=event_logger,
        checkout_builder=CheckoutSessionBuilder(
            catalog=default_catalog,
            gateway=gateway,
            currency=currency,
            site_url=settings.SITE_URL,
        ),
        reconciler=WebhookReconciler(
            gateway=gateway,
            event_logger=event_logger,
            tenant_resolver=resolve_tenant,
            default_currency=currency,
        ),
    )


@cache
def get_payment_services() -> PaymentServices:
    return build_payment_services()
