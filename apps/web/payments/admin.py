"""Admin registration for payment models."""

from django.contrib import admin
from django.http import HttpRequest

from apps.web.payments.models import Payment, PaymentLog


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Admin for payments."""

    list_display = [
        "stripe_payment_id",
        "order",
        "tenant",
        "amount",
        "currency",
        "status",
        "created_at",
    ]
    list_filter = ["status", "currency", "tenant"]
    search_fields = ["stripe_payment_id", "stripe_payment_intent_id"]
    readonly_fields = [
        "order",
        "stripe_payment_id",
        "stripe_payment_intent_id",
        "amount",
        "currency",
        "refunded_at",
        "created_at",
        "updated_at",
    ]


@admin.register(PaymentLog)
class PaymentLogAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Read-only view of the payment event log."""

    list_display = [
        "created_at",
        "event_type",
        "status",
        "restaurant_slug",
        "stripe_session_id",
        "amount",
        "currency",
    ]
    list_filter = ["event_type", "status"]
    search_fields = ["stripe_session_id", "restaurant_slug", "customer_email"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj: object = None) -> bool:
        return False

    def has_delete_permission(self, request: HttpRequest, obj: object = None) -> bool:
        return False
