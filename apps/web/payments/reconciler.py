"""
Stripe webhook reconciliation.

Turns verified Stripe notifications into orders:
- checkout.session.completed: create Order + Payment (exactly once), then items
- checkout.session.expired: log only
- payment_intent.payment_failed: log only
- charge.refunded: mark the Payment refunded, log

Stripe delivers at least once, so idempotency is keyed on the checkout
session id and enforced by the unique Payment.stripe_payment_id column.
Every outcome, including duplicates and bad signatures, is logged.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

import stripe

from apps.web.core.models import Client
from apps.web.core.tenants import resolve_tenant
from apps.web.payments.checkout import ItemSnapshot, parse_snapshot
from apps.web.payments.events import (
    DuplicateDeliveryMetadata,
    EventType,
    OrderFailedMetadata,
    OrderRecordedMetadata,
    PaymentEvent,
    PaymentEventLogger,
    PaymentFailureMetadata,
    ProviderMetadata,
    RefundMetadata,
    build_event_from_session,
    minor_to_major,
)
from apps.web.payments.models import Payment, PaymentLogStatus, PaymentStatus
from apps.web.payments.services import StripeGateway
from apps.web.restaurant.models import Order, OrderItem, OrderStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookResult:
    """HTTP outcome of one webhook delivery."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


RECEIVED = WebhookResult(200, {"received": True})
DUPLICATE = WebhookResult(200, {"received": True, "duplicate": True})


def _payment_intent_id(value: Any) -> str | None:
    """payment_intent is either an id or an expanded object."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, Mapping):
        intent_id = value.get("id")
        return intent_id if isinstance(intent_id, str) and intent_id else None
    return None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


class WebhookReconciler:
    """
    Processes Stripe webhook deliveries.

    Args:
        gateway: Verifies webhook signatures
        event_logger: Sink for payment events
        tenant_resolver: Maps a restaurant slug to its tenant (or None)
        default_currency: Used when a session carries no currency
    """

    def __init__(
        self,
        gateway: StripeGateway,
        event_logger: PaymentEventLogger,
        tenant_resolver: Callable[[str | None], Client | None] = resolve_tenant,
        default_currency: str = "sar",
    ) -> None:
        self.gateway = gateway
        self.event_logger = event_logger
        self.tenant_resolver = tenant_resolver
        self.default_currency = default_currency

    def handle(self, payload: bytes, signature: str | None) -> WebhookResult:
        """
        Verify and process one delivery.

        Args:
            payload: Raw request body
            signature: Stripe-Signature header value, if present

        Returns:
            WebhookResult to send back to Stripe
        """
        if not self.gateway.webhook_secret:
            logger.error("Stripe Webhook Error: STRIPE_WEBHOOK_SECRET is missing.")
            return WebhookResult(500, {"error": "Webhook secret not configured"})

        if not signature:
            logger.warning("Stripe Webhook Error: Missing stripe-signature header.")
            self._record_signature_failure("Missing signature")
            return WebhookResult(400, {"error": "Missing signature"})

        try:
            event = self.gateway.verify_webhook(payload, signature)
        except (ValueError, stripe.StripeError) as e:
            message = str(e) or "Unknown error"
            logger.warning("Stripe Webhook Signature Error: %s", message)
            self._record_signature_failure(message)
            return WebhookResult(
                400, {"error": f"Webhook signature verification failed: {message}"}
            )

        event_type = event.get("type")
        obj = _mapping(_mapping(event.get("data")).get("object"))
        logger.info("Received Stripe event: %s", event_type)

        match event_type:
            case EventType.SESSION_COMPLETED:
                return self._handle_session_completed(obj)
            case EventType.SESSION_EXPIRED:
                self._handle_session_expired(obj)
            case EventType.PAYMENT_FAILED:
                self._handle_payment_failed(obj)
            case EventType.CHARGE_REFUNDED:
                self._handle_charge_refunded(obj)
            case _:
                logger.debug("Ignoring unhandled Stripe event: %s", event_type)

        return RECEIVED

    # -------------------------------------------------------------------------
    # Signature failures
    # -------------------------------------------------------------------------

    def _record_signature_failure(self, message: str) -> None:
        # The payload is untrusted here, so no id is extracted from it.
        self.event_logger.record(
            PaymentEvent(
                stripe_session_id=None,
                restaurant_slug=None,
                event_type=EventType.SIGNATURE_FAILED,
                status=PaymentLogStatus.FAILED,
                error_message=message,
            )
        )

    # -------------------------------------------------------------------------
    # checkout.session.completed
    # -------------------------------------------------------------------------

    def _handle_session_completed(self, session: Mapping[str, Any]) -> WebhookResult:
        session_id = session.get("id")
        if not isinstance(session_id, str) or not session_id:
            logger.warning("Checkout session completed without an id, skipping")
            return RECEIVED

        # Idempotency: must run before any order write.
        existing = Payment.objects.filter(stripe_payment_id=session_id).first()
        if existing is not None:
            logger.info(
                "Idempotency: session %s already processed, skipping.", session_id
            )
            self._record_duplicate(session, existing.order_id)
            return DUPLICATE

        metadata = _mapping(session.get("metadata"))
        customer = _mapping(session.get("customer_details"))
        restaurant_slug = metadata.get("restaurant_slug") or None
        total = minor_to_major(session.get("amount_total")) or Decimal("0.00")
        currency = session.get("currency") or self.default_currency

        try:
            items = parse_snapshot(metadata.get("items"))
        except ValueError as e:
            logger.error("Invalid items metadata on session %s: %s", session_id, e)
            self.event_logger.record(
                build_event_from_session(
                    session,
                    EventType.SESSION_COMPLETED,
                    PaymentLogStatus.FAILED,
                    f"Invalid items metadata: {e}",
                )
            )
            return WebhookResult(500, {"error": "Failed to process webhook"})

        tenant = self.tenant_resolver(restaurant_slug)

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    restaurant_slug=restaurant_slug,
                    tenant=tenant,
                    customer_name=customer.get("name") or None,
                    phone_number=customer.get("phone") or None,
                    total_price=total,
                    status=OrderStatus.PAID,
                )
                Payment.objects.create(
                    order=order,
                    tenant=tenant,
                    stripe_payment_id=session_id,
                    stripe_payment_intent_id=(
                        _payment_intent_id(session.get("payment_intent")) or ""
                    ),
                    amount=total,
                    currency=currency,
                    status=PaymentStatus.SUCCEEDED,
                )
        except IntegrityError:
            # A concurrent delivery claimed the session first; the order
            # created above was rolled back with the failed payment insert.
            duplicate = Payment.objects.filter(stripe_payment_id=session_id).first()
            if duplicate is not None:
                logger.info(
                    "Idempotency: session %s recorded concurrently, skipping.",
                    session_id,
                )
                self._record_duplicate(session, duplicate.order_id)
                return DUPLICATE
            logger.exception("Failed to save order for session %s", session_id)
            return self._order_failed(session, items, "integrity error")
        except DatabaseError as e:
            logger.exception("Failed to save order for session %s", session_id)
            return self._order_failed(session, items, str(e))

        items_error = self._save_items(order, items)

        self.event_logger.record(
            PaymentEvent(
                stripe_session_id=session_id,
                restaurant_slug=restaurant_slug,
                event_type=EventType.SESSION_COMPLETED,
                status=(
                    PaymentLogStatus.FAILED if items_error else PaymentLogStatus.SUCCESS
                ),
                amount=total,
                currency=currency,
                customer_email=customer.get("email") or None,
                customer_phone=customer.get("phone") or None,
                error_message=(
                    f"Order {order.pk} saved but items failed: {items_error}"
                    if items_error
                    else None
                ),
                metadata=OrderRecordedMetadata(
                    order_id=order.pk,
                    payment_recorded=True,
                    items_recorded=items_error is None,
                    items_count=len(items),
                ),
            )
        )

        logger.info("Order saved successfully: order_id=%s session=%s", order.pk, session_id)
        return RECEIVED

    def _save_items(self, order: Order, items: list[ItemSnapshot]) -> str | None:
        """
        Insert line items for a persisted order. Best-effort.

        Returns:
            Error message on failure, None on success
        """
        if not items:
            return None

        try:
            with transaction.atomic():
                OrderItem.objects.bulk_create(
                    [
                        OrderItem(
                            order=order,
                            item_name=item.name,
                            quantity=item.quantity,
                            price=item.price,
                        )
                        for item in items
                    ]
                )
        except DatabaseError as e:
            # Not rolled back: redelivery would only hit the duplicate path.
            logger.exception("Failed to save items for order %s", order.pk)
            return str(e)

        return None

    def _order_failed(
        self,
        session: Mapping[str, Any],
        items: list[ItemSnapshot],
        reason: str,
    ) -> WebhookResult:
        event = build_event_from_session(
            session,
            EventType.SESSION_COMPLETED,
            PaymentLogStatus.FAILED,
            f"Failed to save order: {reason}",
        )
        event.metadata = OrderFailedMetadata(
            items=[item.model_dump(mode="json") for item in items]
        )
        self.event_logger.record(event)
        # 500 lets Stripe redeliver; nothing was persisted.
        return WebhookResult(500, {"error": "Failed to save order"})

    def _record_duplicate(self, session: Mapping[str, Any], order_id: int) -> None:
        event = build_event_from_session(
            session, EventType.SESSION_COMPLETED, PaymentLogStatus.SUCCESS
        )
        event.metadata = DuplicateDeliveryMetadata(order_id=order_id)
        self.event_logger.record(event)

    # -------------------------------------------------------------------------
    # Informational events
    # -------------------------------------------------------------------------

    def _handle_session_expired(self, session: Mapping[str, Any]) -> None:
        event = build_event_from_session(
            session, EventType.SESSION_EXPIRED, PaymentLogStatus.EXPIRED
        )
        metadata = _mapping(session.get("metadata"))
        data = {key: value for key, value in metadata.items() if key != "items"}
        if session.get("expires_at") is not None:
            data["expires_at"] = session["expires_at"]
        event.metadata = ProviderMetadata(data=data)
        self.event_logger.record(event)

    def _handle_payment_failed(self, intent: Mapping[str, Any]) -> None:
        last_error = _mapping(intent.get("last_payment_error"))
        metadata = _mapping(intent.get("metadata"))
        error_message = last_error.get("message") or "Payment failed"

        logger.info("Payment failed for %s: %s", intent.get("id"), error_message)

        self.event_logger.record(
            PaymentEvent(
                stripe_session_id=intent.get("id") or None,
                restaurant_slug=metadata.get("restaurant_slug") or None,
                event_type=EventType.PAYMENT_FAILED,
                status=PaymentLogStatus.FAILED,
                amount=minor_to_major(intent.get("amount")),
                currency=intent.get("currency") or None,
                error_message=error_message,
                metadata=PaymentFailureMetadata(
                    failure_code=last_error.get("code"),
                    failure_type=last_error.get("type"),
                ),
            )
        )

    def _handle_charge_refunded(self, charge: Mapping[str, Any]) -> None:
        intent_id = _payment_intent_id(charge.get("payment_intent"))
        metadata = _mapping(charge.get("metadata"))
        payment_updated = False

        if intent_id:
            now = timezone.now()
            try:
                with transaction.atomic():
                    updated = Payment.objects.filter(
                        Q(stripe_payment_id=intent_id)
                        | Q(stripe_payment_intent_id=intent_id)
                    ).update(
                        status=PaymentStatus.REFUNDED,
                        refunded_at=now,
                        updated_at=now,
                    )
            except DatabaseError:
                logger.exception("Refund update error for %s", intent_id)
            else:
                payment_updated = updated > 0
                if not payment_updated:
                    logger.info("No payment found for refunded intent %s", intent_id)
        else:
            logger.warning("Refunded charge %s has no payment_intent", charge.get("id"))

        self.event_logger.record(
            PaymentEvent(
                stripe_session_id=intent_id or charge.get("id") or None,
                restaurant_slug=metadata.get("restaurant_slug") or None,
                event_type=EventType.CHARGE_REFUNDED,
                status=PaymentLogStatus.SUCCESS,
                amount=minor_to_major(charge.get("amount_refunded")),
                currency=charge.get("currency") or None,
                metadata=RefundMetadata(
                    refund_reason=metadata.get("refund_reason"),
                    payment_updated=payment_updated,
                ),
            )
        )
