"""
Checkout API.

POST /api/checkout
Body: {"items": [{"name", "slug"?, "price", "quantity"}], "restaurantSlug": "..."}
Response: {"url": "<hosted payment page>"} or {"error": "..."}
"""

import json
import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from apps.web.payments.checkout import CheckoutSessionBuilder
from apps.web.payments.exceptions import PaymentError

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class CheckoutView(View):
    """
    Creates a Stripe Checkout Session for a storefront cart.

    The builder is injected with CheckoutView.as_view(builder=...).
    """

    http_method_names = ["post"]
    builder: CheckoutSessionBuilder | None = None

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            body: Any = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JsonResponse({"error": "Invalid JSON in request body"}, status=400)

        if not isinstance(body, dict):
            body = {}

        if self.builder is None:
            raise RuntimeError("CheckoutView requires a builder")

        try:
            session = self.builder.create_checkout_session(
                cart_items=body.get("items"),
                restaurant_slug=body.get("restaurantSlug"),
                origin=request.headers.get("Origin"),
            )
        except PaymentError as e:
            if e.status_code >= 500:
                logger.error("Checkout failed: %s (%s)", e.message, e.code)
            return JsonResponse({"error": e.message}, status=e.status_code)

        return JsonResponse({"url": session.url})
