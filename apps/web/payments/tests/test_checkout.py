"""Tests for the checkout session builder and the checkout endpoint."""

import json
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.test import Client as DjangoClient

import pytest
import stripe

from apps.web.payments.checkout import (
    CheckoutSessionBuilder,
    clamp_quantity,
    parse_snapshot,
    to_minor_units,
)
from apps.web.payments.exceptions import (
    CheckoutValidationError,
    PaymentConfigurationError,
    PaymentProcessorError,
)
from apps.web.payments.services import StripeGateway
from apps.web.restaurant.catalog import default_catalog


class FakeGateway:
    """Records checkout sessions instead of calling Stripe."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict] = []
        self.error = error

    def create_checkout_session(self, **kwargs):
        if self.error:
            raise self.error
        self.calls.append(kwargs)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1")


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def builder(gateway) -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder(
        catalog=default_catalog,
        gateway=gateway,
        currency="sar",
        site_url="https://orders.example.com",
    )


class TestClampQuantity:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3, 3),
            (2.7, 2),
            ("4", 4),
            (0, 1),
            (-2, 1),
            (0.5, 1),
            (None, 1),
            ("abc", 1),
            (float("nan"), 1),
            (float("inf"), 1),
            (True, 1),
        ],
    )
    def test_clamp(self, value, expected):
        assert clamp_quantity(value) == expected


class TestToMinorUnits:
    def test_whole_amount(self):
        assert to_minor_units(Decimal("12")) == 1200

    def test_rounds_half_up(self):
        assert to_minor_units(Decimal("12.005")) == 1201
        assert to_minor_units(Decimal("12.004")) == 1200


class TestCreateCheckoutSession:
    """Server-side pricing and validation."""

    def test_charges_catalog_price_not_client_price(self, builder, gateway):
        session = builder.create_checkout_session(
            [{"name": "Hummus", "price": 0.01, "quantity": 2}],
            "al-bayt",
        )

        line_items = gateway.calls[0]["line_items"]
        assert line_items == [
            {
                "price_data": {
                    "currency": "sar",
                    "product_data": {"name": "Hummus"},
                    "unit_amount": 1200,
                },
                "quantity": 2,
            }
        ]
        assert session.total == Decimal("24")
        assert session.url == "https://checkout.stripe.com/c/cs_test_1"

    def test_canonical_title_used_for_line_name(self, builder, gateway):
        builder.create_checkout_session([{"name": "  lamb kebab "}], "al-bayt")

        product = gateway.calls[0]["line_items"][0]["price_data"]["product_data"]
        assert product["name"] == "Lamb Kebab"

    def test_slug_fallback(self, builder, gateway):
        builder.create_checkout_session(
            [{"name": "Biryani Special", "slug": "biryani", "quantity": 1}],
            "al-bayt",
        )

        line = gateway.calls[0]["line_items"][0]
        assert line["price_data"]["product_data"]["name"] == "Lamb Biryani"
        assert line["price_data"]["unit_amount"] == 3500

    def test_quantity_clamped(self, builder, gateway):
        builder.create_checkout_session(
            [
                {"name": "Hummus", "quantity": 0},
                {"name": "Kibbeh", "quantity": 2.7},
                {"name": "Tabbouleh", "quantity": "lots"},
            ],
            "al-bayt",
        )

        quantities = [line["quantity"] for line in gateway.calls[0]["line_items"]]
        assert quantities == [1, 2, 1]

    def test_metadata_snapshot(self, builder, gateway):
        builder.create_checkout_session(
            [{"name": "Hummus", "quantity": 2}, {"name": "Orange Juice", "slug": "orange"}],
            "al-bayt",
        )

        metadata = gateway.calls[0]["metadata"]
        assert metadata["restaurant_slug"] == "al-bayt"
        snapshot = parse_snapshot(metadata["items"])
        assert [(i.name, i.price, i.quantity) for i in snapshot] == [
            ("Hummus", Decimal("12"), 2),
            ("Fresh Orange Juice", Decimal("10"), 1),
        ]
        # Plain JSON list of strings/numbers, readable by the webhook
        assert isinstance(json.loads(metadata["items"]), list)

    def test_redirect_urls_use_origin(self, builder, gateway):
        session = builder.create_checkout_session(
            [{"name": "Hummus"}], "al-bayt", origin="https://shop.example.com/"
        )

        assert session.success_url == "https://shop.example.com/al-bayt/menu?success=true"
        assert session.cancel_url == "https://shop.example.com/al-bayt/menu?canceled=true"
        assert gateway.calls[0]["success_url"] == session.success_url

    def test_redirect_urls_fall_back_to_site_url(self, builder):
        session = builder.create_checkout_session([{"name": "Hummus"}], "al-bayt")
        assert session.success_url == "https://orders.example.com/al-bayt/menu?success=true"

    def test_unknown_item_rejects_whole_cart(self, builder, gateway):
        with pytest.raises(CheckoutValidationError) as exc_info:
            builder.create_checkout_session(
                [{"name": "Hummus"}, {"name": "Pizza"}, {"name": "Sushi"}],
                "al-bayt",
            )

        error = exc_info.value
        assert error.code == CheckoutValidationError.ITEMS_NOT_FOUND
        assert error.names == ["Pizza", "Sushi"]
        assert error.message == "These items are not on our menu: Pizza, Sushi"
        assert gateway.calls == []

    def test_free_pizza_rejected_before_processor(self, builder, gateway):
        with pytest.raises(CheckoutValidationError) as exc_info:
            builder.create_checkout_session(
                [{"name": "FREE PIZZA", "price": 0, "quantity": 1}], "alasala"
            )

        assert "FREE PIZZA" in exc_info.value.message
        assert "not on our menu" in exc_info.value.message
        assert gateway.calls == []

    def test_nameless_entries_reported(self, builder):
        with pytest.raises(CheckoutValidationError) as exc_info:
            builder.create_checkout_session(["Hummus", {"quantity": 2}], "al-bayt")

        assert exc_info.value.names == ["unnamed item", "unnamed item"]

    @pytest.mark.parametrize(
        "slug", [None, "", 42, "x" * 51, "al bayt", "al-bayt/../admin"]
    )
    def test_invalid_slug(self, builder, slug):
        with pytest.raises(CheckoutValidationError) as exc_info:
            builder.create_checkout_session([{"name": "Hummus"}], slug)

        assert exc_info.value.code == CheckoutValidationError.INVALID_SLUG
        assert exc_info.value.status_code == 400

    def test_slug_at_column_limit_accepted(self, builder, gateway):
        slug = "a" * 50
        session = builder.create_checkout_session([{"name": "Hummus"}], slug)

        assert session.restaurant_slug == slug
        assert gateway.calls[0]["metadata"]["restaurant_slug"] == slug

    @pytest.mark.parametrize("items", [None, [], "Hummus", {"name": "Hummus"}])
    def test_empty_cart(self, builder, items):
        with pytest.raises(CheckoutValidationError) as exc_info:
            builder.create_checkout_session(items, "al-bayt")

        assert exc_info.value.code == CheckoutValidationError.EMPTY_CART

    def test_item_validation_runs_before_processor_check(self):
        builder = CheckoutSessionBuilder(default_catalog, StripeGateway(""))

        with pytest.raises(CheckoutValidationError):
            builder.create_checkout_session([{"name": "Pizza"}], "al-bayt")

        with pytest.raises(PaymentConfigurationError):
            builder.create_checkout_session([{"name": "Hummus"}], "al-bayt")


@pytest.mark.django_db
class TestCheckoutView:
    """Tests for POST /api/checkout"""

    url = "/api/checkout"

    def _post(self, body, **extra):
        return DjangoClient().post(
            self.url,
            data=body if isinstance(body, str) else json.dumps(body),
            content_type="application/json",
            **extra,
        )

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_returns_hosted_page_url(self, mock_create):
        mock_create.return_value = MagicMock(
            id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1"
        )

        response = self._post(
            {
                "items": [{"name": "Hummus", "price": 1, "quantity": 2}],
                "restaurantSlug": "al-bayt",
            },
            HTTP_ORIGIN="https://shop.example.com",
        )

        assert response.status_code == 200
        assert response.json() == {"url": "https://checkout.stripe.com/c/cs_test_1"}
        kwargs = mock_create.call_args.kwargs
        assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 1200
        assert kwargs["success_url"] == "https://shop.example.com/al-bayt/menu?success=true"

    def test_unknown_items(self):
        response = self._post(
            {"items": [{"name": "Pizza", "price": 1}], "restaurantSlug": "al-bayt"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "These items are not on our menu: Pizza"}

    def test_missing_slug(self):
        response = self._post({"items": [{"name": "Hummus"}]})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing or invalid restaurantSlug."}

    def test_empty_cart(self):
        response = self._post({"items": [], "restaurantSlug": "al-bayt"})

        assert response.status_code == 400
        assert response.json() == {"error": "Cart is empty."}

    def test_invalid_json(self):
        response = self._post("{not json")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}

    def test_body_not_utf8(self):
        response = DjangoClient().post(
            self.url,
            data=b'{"restaurantSlug": "\xc3\x28"}',
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON in request body"}

    def test_overlong_slug_rejected_before_processor(self):
        with patch(
            "apps.web.payments.services.stripe.checkout.Session.create"
        ) as mock_create:
            response = self._post(
                {"items": [{"name": "Hummus"}], "restaurantSlug": "a" * 60}
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing or invalid restaurantSlug."}
        mock_create.assert_not_called()

    def test_non_object_body(self):
        response = self._post([1, 2, 3])

        assert response.status_code == 400
        assert response.json() == {"error": "Missing or invalid restaurantSlug."}

    @patch("apps.web.payments.services.stripe.checkout.Session.create")
    def test_processor_error(self, mock_create):
        mock_create.side_effect = stripe.APIConnectionError("Stripe is down")

        response = self._post({"items": [{"name": "Hummus"}], "restaurantSlug": "al-bayt"})

        assert response.status_code == 502
        assert response.json() == {"error": "Stripe is down"}

    def test_get_not_allowed(self):
        response = DjangoClient().get(self.url)
        assert response.status_code == 405


class TestCheckoutProcessorErrors:
    def test_processor_error_propagates(self):
        builder = CheckoutSessionBuilder(
            default_catalog, FakeGateway(error=PaymentProcessorError("declined"))
        )

        with pytest.raises(PaymentProcessorError):
            builder.create_checkout_session([{"name": "Hummus"}], "al-bayt")
