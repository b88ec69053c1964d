"""
Payment models - transactional payment records and the payment event log.

Payment is the source of truth for "has this checkout been reconciled";
PaymentLog is append-only diagnostics, correlated only by session id.
"""

from django.db import models

from apps.web.core.models import TenantScopedModel
from apps.web.restaurant.models import Order


class PaymentStatus(models.TextChoices):
    """Payment processing status."""

    PENDING = "pending", "Pending"
    SUCCEEDED = "succeeded", "Succeeded"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Payment(TenantScopedModel):
    """
    Transactional record of a reconciled checkout.

    stripe_payment_id is unique: a second insert for the same checkout
    session fails at the database, which reconciliation treats as a
    duplicate delivery.
    """

    order = models.OneToOneField(
        Order,
        on_delete=models.CASCADE,
        related_name="payment",
    )
    stripe_payment_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe Checkout Session ID (cs_xxx)",
    )
    stripe_payment_intent_id = models.CharField(
        max_length=255,
        blank=True,
        help_text="Stripe PaymentIntent ID (pi_xxx), used to match refunds",
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    refunded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "payments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["stripe_payment_intent_id"], name="payment_intent_idx"
            ),
            models.Index(fields=["tenant", "status"], name="payment_tenant_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.stripe_payment_id} ({self.status})"


class PaymentLogStatus(models.TextChoices):
    """Outcome recorded for a payment lifecycle event."""

    SUCCESS = "success", "Success"
    FAILED = "failed", "Failed"
    EXPIRED = "expired", "Expired"
    PENDING = "pending", "Pending"


class PaymentLog(models.Model):
    """
    Append-only log of payment lifecycle events.

    One row per webhook notification, duplicates and failures included.
    stripe_session_id is null only when signature verification failed.
    """

    stripe_session_id = models.CharField(max_length=255, null=True, blank=True)
    restaurant_slug = models.SlugField(null=True, blank=True)
    event_type = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=PaymentLogStatus.choices)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    currency = models.CharField(max_length=3, default="sar")
    customer_email = models.CharField(max_length=254, null=True, blank=True)
    customer_phone = models.CharField(max_length=40, null=True, blank=True)
    error_message = models.TextField(null=True, blank=True)
    metadata = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "payment_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["stripe_session_id"], name="paymentlog_session_idx"),
            models.Index(
                fields=["restaurant_slug", "created_at"], name="paymentlog_slug_idx"
            ),
            models.Index(fields=["event_type", "status"], name="paymentlog_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_type}:{self.status} ({self.stripe_session_id or '-'})"

    def save(self, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        if not self._state.adding:
            raise ValueError("Payment log entries are append-only")
        super().save(*args, **kwargs)
