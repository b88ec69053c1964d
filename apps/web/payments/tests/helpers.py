"""Helpers for building signed Stripe webhook deliveries in tests."""

import hashlib
import hmac
import json
import time
from typing import Any

WEBHOOK_SECRET = "whsec_test123"


def stripe_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_test") -> bytes:
    """Serialize an event the way Stripe posts it."""
    return json.dumps(
        {
            "id": event_id,
            "object": "event",
            "type": event_type,
            "data": {"object": obj},
        }
    ).encode()


def sign_payload(
    payload: bytes,
    secret: str = WEBHOOK_SECRET,
    timestamp: int | None = None,
) -> str:
    """Build a Stripe-Signature header value for `payload`."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def completed_session(
    session_id: str = "cs_test_1",
    slug: str = "al-bayt",
    items: list[dict[str, Any]] | None = None,
    amount_total: int = 3900,
    **overrides: Any,
) -> dict[str, Any]:
    """A checkout.session.completed object as Stripe sends it."""
    if items is None:
        items = [
            {"name": "Hummus", "price": "12", "quantity": 2},
            {"name": "Pomegranate Juice", "price": "10", "quantity": 1},
        ]
    session: dict[str, Any] = {
        "id": session_id,
        "object": "checkout.session",
        "amount_total": amount_total,
        "currency": "sar",
        "payment_intent": "pi_test_1",
        "customer_details": {
            "name": "Sara Ahmed",
            "email": "sara@example.com",
            "phone": "+966500000001",
        },
        "metadata": {"restaurant_slug": slug, "items": json.dumps(items)},
    }
    session.update(overrides)
    return session
