"""
Payment event logging.

Every webhook notification leaves one PaymentLog row, whatever happened to
the order. Logging is observability, not state: PaymentEventLogger.record()
never raises, so a broken log table cannot fail reconciliation.
"""

import logging
import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Annotated, Any, Literal

from django.db import transaction

from pydantic import BaseModel, Field

from apps.web.payments.models import PaymentLog, PaymentLogStatus

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "sar"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EventType(StrEnum):
    """Payment lifecycle events that are logged."""

    SESSION_COMPLETED = "checkout.session.completed"
    SESSION_EXPIRED = "checkout.session.expired"
    PAYMENT_FAILED = "payment_intent.payment_failed"
    CHARGE_REFUNDED = "charge.refunded"
    SIGNATURE_FAILED = "webhook.signature_failed"


# =============================================================================
# Event metadata (discriminated on `kind`)
# =============================================================================


class OrderRecordedMetadata(BaseModel):
    """An order was persisted for the session."""

    kind: Literal["order_recorded"] = "order_recorded"
    order_id: int
    payment_recorded: bool = True
    items_recorded: bool = True
    items_count: int = 0


class OrderFailedMetadata(BaseModel):
    """The order could not be persisted; keeps the charged items for follow-up."""

    kind: Literal["order_failed"] = "order_failed"
    items: list[dict[str, Any]] = Field(default_factory=list)


class DuplicateDeliveryMetadata(BaseModel):
    """A redelivered notification for an already reconciled session."""

    kind: Literal["duplicate_delivery"] = "duplicate_delivery"
    order_id: int | None = None


class PaymentFailureMetadata(BaseModel):
    kind: Literal["payment_failure"] = "payment_failure"
    failure_code: str | None = None
    failure_type: str | None = None


class RefundMetadata(BaseModel):
    kind: Literal["refund"] = "refund"
    refund_reason: str | None = None
    payment_updated: bool = False


class ProviderMetadata(BaseModel):
    """Provider-specific data with no fixed schema."""

    kind: Literal["provider"] = "provider"
    data: dict[str, Any] = Field(default_factory=dict)


EventMetadata = Annotated[
    OrderRecordedMetadata
    | OrderFailedMetadata
    | DuplicateDeliveryMetadata
    | PaymentFailureMetadata
    | RefundMetadata
    | ProviderMetadata,
    Field(discriminator="kind"),
]


class PaymentEvent(BaseModel):
    """A payment lifecycle event, ready to be logged."""

    stripe_session_id: str | None = None
    restaurant_slug: str | None = None
    event_type: str
    status: PaymentLogStatus
    amount: Decimal | None = None
    currency: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    error_message: str | None = None
    metadata: EventMetadata | None = None


# =============================================================================
# Helpers
# =============================================================================


def minor_to_major(amount: Any) -> Decimal | None:
    """
    Convert an amount in minor units (halalas, cents) to major units.

    Example:
        minor_to_major(5000)  # Decimal("50.00")

    Returns None for missing or non-numeric input.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        return (Decimal(str(amount)) / 100).quantize(Decimal("0.01"))
    except InvalidOperation:
        return None


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def payment_event_errors(event: PaymentEvent) -> list[str]:
    """
    Sanity-check an event before it is written.

    Returns:
        List of problems (empty if the event looks right)
    """
    errors: list[str] = []

    if not event.event_type:
        errors.append("event_type is required")

    if event.amount is not None and event.amount < 0:
        errors.append("amount cannot be negative")

    if event.customer_email and not is_valid_email(event.customer_email):
        errors.append("customer_email is not a valid email")

    return errors


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def build_event_from_session(
    session: Mapping[str, Any],
    event_type: str,
    status: PaymentLogStatus,
    error_message: str | None = None,
) -> PaymentEvent:
    """
    Build a PaymentEvent from a Stripe Checkout Session payload.

    Missing fields become None; this never raises on sparse payloads.
    """
    metadata = session.get("metadata") or {}
    customer = session.get("customer_details") or {}
    if not isinstance(metadata, Mapping):
        metadata = {}
    if not isinstance(customer, Mapping):
        customer = {}

    return PaymentEvent(
        stripe_session_id=_str_or_none(session.get("id")),
        restaurant_slug=_str_or_none(metadata.get("restaurant_slug")),
        event_type=event_type,
        status=status,
        amount=minor_to_major(session.get("amount_total")),
        currency=_str_or_none(session.get("currency")),
        customer_email=_str_or_none(customer.get("email")),
        customer_phone=_str_or_none(customer.get("phone")),
        error_message=error_message or None,
    )


# =============================================================================
# Logger
# =============================================================================


class PaymentEventLogger:
    """
    Writes PaymentEvents to the payment_logs table.

    Args:
        default_currency: Applied when an event carries no currency
    """

    def __init__(self, default_currency: str = DEFAULT_CURRENCY) -> None:
        self.default_currency = default_currency

    def record(self, event: PaymentEvent) -> bool:
        """
        Append an event to the log.

        Returns:
            True if the row was written, False otherwise (never raises)
        """
        for problem in payment_event_errors(event):
            logger.warning("Payment event %s: %s", event.event_type, problem)

        try:
            with transaction.atomic():
                PaymentLog.objects.create(
                    stripe_session_id=event.stripe_session_id,
                    restaurant_slug=event.restaurant_slug,
                    event_type=event.event_type,
                    status=event.status,
                    amount=event.amount,
                    currency=event.currency or self.default_currency,
                    customer_email=event.customer_email,
                    customer_phone=event.customer_phone,
                    error_message=event.error_message,
                    metadata=(
                        event.metadata.model_dump(mode="json")
                        if event.metadata
                        else None
                    ),
                )
        except Exception:
            logger.exception("Failed to log payment event: %s", event.event_type)
            return False

        logger.info("Payment log recorded: %s - %s", event.event_type, event.status)
        return True
