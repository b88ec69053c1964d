"""
Checkout session builder.

Turns an untrusted cart into a Stripe Checkout Session:
1. Validate slug and cart
2. Resolve every item against the server-side catalog
3. Charge server prices only
4. Snapshot the resolved items into session metadata for the webhook

Rejection is all-or-nothing: one unknown item fails the whole cart.
"""

import logging
import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import validate_slug

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from apps.web.payments.exceptions import CheckoutValidationError
from apps.web.payments.services import StripeGateway
from apps.web.restaurant.catalog import MenuCatalog

logger = logging.getLogger(__name__)

UNNAMED_ITEM = "unnamed item"

# Matches SlugField's default max_length on Order and PaymentLog
SLUG_MAX_LENGTH = 50


def clamp_quantity(value: Any) -> int:
    """
    Coerce a client-supplied quantity to a positive integer.

    Non-numeric, non-finite and non-positive values become 1; fractional
    values are floored (2.7 -> 2), never below 1.
    """
    if isinstance(value, bool):
        return 1
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(number) or number <= 0:
        return 1
    return max(1, math.floor(number))


def is_valid_restaurant_slug(value: Any) -> bool:
    """Check a slug fits the restaurant_slug columns of orders and payment logs."""
    if not value or not isinstance(value, str) or len(value) > SLUG_MAX_LENGTH:
        return False
    try:
        validate_slug(value)
    except ValidationError:
        return False
    return True


def to_minor_units(amount: Decimal) -> int:
    """Major units to minor units, rounded half-up (12.005 -> 1201)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ClientCartLineItem(BaseModel):
    """
    A cart line as submitted by the browser. Untrusted.

    Only name/slug (as lookup keys) and quantity (clamped) are used;
    the price is accepted and ignored.
    """

    name: str = ""
    slug: str | None = None
    price: Any = None
    quantity: int = 1

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("slug", mode="before")
    @classmethod
    def _coerce_slug(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> int:
        return clamp_quantity(value)


class ResolvedLineItem(BaseModel):
    """A cart line after catalog resolution. Carries the server price only."""

    model_config = ConfigDict(frozen=True)

    name: str
    server_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def unit_amount(self) -> int:
        return to_minor_units(self.server_price)

    @property
    def line_total(self) -> Decimal:
        return self.server_price * self.quantity


class ItemSnapshot(BaseModel):
    """One entry of the items snapshot stored in session metadata."""

    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)


_snapshot_adapter = TypeAdapter(list[ItemSnapshot])


def serialize_snapshot(items: Sequence[ResolvedLineItem]) -> str:
    """Serialize resolved items for the `items` metadata key."""
    snapshot = [
        ItemSnapshot(name=item.name, price=item.server_price, quantity=item.quantity)
        for item in items
    ]
    return _snapshot_adapter.dump_json(snapshot).decode()


def parse_snapshot(raw: str | None) -> list[ItemSnapshot]:
    """
    Parse the `items` metadata written by serialize_snapshot().

    Raises:
        ValueError: If the value is not a valid snapshot
    """
    if not raw:
        return []
    return _snapshot_adapter.validate_json(raw)


class CheckoutSession(BaseModel):
    """A created checkout session."""

    model_config = ConfigDict(frozen=True)

    restaurant_slug: str
    items: tuple[ResolvedLineItem, ...]
    total: Decimal
    session_id: str
    url: str
    success_url: str
    cancel_url: str


class CheckoutSessionBuilder:
    """
    Builds Stripe Checkout Sessions from client carts.

    Args:
        catalog: Source of canonical names and prices
        gateway: Stripe gateway used to create the session
        currency: ISO currency code charged
        site_url: Origin used for redirects when the request has none
    """

    def __init__(
        self,
        catalog: MenuCatalog,
        gateway: StripeGateway,
        currency: str = "sar",
        site_url: str = "",
    ) -> None:
        self.catalog = catalog
        self.gateway = gateway
        self.currency = currency
        self.site_url = site_url

    def resolve_items(self, cart_items: Sequence[Any]) -> list[ResolvedLineItem]:
        """
        Resolve every cart line against the catalog.

        Raises:
            CheckoutValidationError: ITEMS_NOT_FOUND naming every unresolved item
        """
        resolved: list[ResolvedLineItem] = []
        invalid: list[str] = []

        for raw in cart_items:
            if not isinstance(raw, dict):
                invalid.append(UNNAMED_ITEM)
                continue

            line = ClientCartLineItem.model_validate(raw)
            if not line.name:
                invalid.append(UNNAMED_ITEM)
                continue

            menu_item = self.catalog.resolve(line.name, line.slug)
            if menu_item is None:
                invalid.append(line.name)
                continue

            resolved.append(
                ResolvedLineItem(
                    name=menu_item.title,
                    server_price=menu_item.price,
                    quantity=line.quantity,
                )
            )

        if invalid:
            raise CheckoutValidationError.items_not_found(invalid)

        return resolved

    def build_line_items(self, items: Sequence[ResolvedLineItem]) -> list[dict[str, Any]]:
        """Stripe line items priced from the catalog, in minor units."""
        return [
            {
                "price_data": {
                    "currency": self.currency,
                    "product_data": {"name": item.name},
                    "unit_amount": item.unit_amount,
                },
                "quantity": item.quantity,
            }
            for item in items
        ]

    def create_checkout_session(
        self,
        cart_items: Any,
        restaurant_slug: Any,
        origin: str | None = None,
    ) -> CheckoutSession:
        """
        Validate a cart and open a Stripe Checkout Session for it.

        Args:
            cart_items: Items as posted by the client
            restaurant_slug: Restaurant the cart belongs to
            origin: Origin of the storefront, for redirect URLs

        Returns:
            CheckoutSession with the hosted payment page URL

        Raises:
            CheckoutValidationError: Bad slug, empty cart or unknown items
            PaymentConfigurationError: Stripe is not configured
            PaymentProcessorError: Stripe rejected the session
        """
        if not is_valid_restaurant_slug(restaurant_slug):
            raise CheckoutValidationError.invalid_slug()

        if not isinstance(cart_items, list | tuple) or not cart_items:
            raise CheckoutValidationError.empty_cart()

        items = self.resolve_items(cart_items)

        base_url = (origin or self.site_url).rstrip("/")
        success_url = f"{base_url}/{restaurant_slug}/menu?success=true"
        cancel_url = f"{base_url}/{restaurant_slug}/menu?canceled=true"

        session = self.gateway.create_checkout_session(
            line_items=self.build_line_items(items),
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={
                "restaurant_slug": restaurant_slug,
                "items": serialize_snapshot(items),
            },
        )

        total = sum((item.line_total for item in items), Decimal("0"))
        logger.info(
            "Checkout session created: session=%s slug=%s items=%d total=%s",
            session.id,
            restaurant_slug,
            len(items),
            total,
        )

        return CheckoutSession(
            restaurant_slug=restaurant_slug,
            items=tuple(items),
            total=total,
            session_id=session.id,
            url=session.url,
            success_url=success_url,
            cancel_url=cancel_url,
        )
