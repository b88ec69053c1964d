"""
URL routing for payment endpoints.
"""

from django.urls import path

from apps.web.payments.container import get_payment_services
from apps.web.payments.views import CheckoutView
from apps.web.payments.webhooks import StripeWebhookView

app_name = "payments"

services = get_payment_services()

urlpatterns = [
    path(
        "checkout",
        CheckoutView.as_view(builder=services.checkout_builder),
        name="checkout",
    ),
    path(
        "webhook/stripe",
        StripeWebhookView.as_view(reconciler=services.reconciler),
        name="stripe-webhook",
    ),
]
