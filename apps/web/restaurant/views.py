"""
Menu API views - Public read-only endpoints over the static catalog.

Every restaurant slug currently serves the same catalog; the slug is echoed
so storefront pages can build links and checkout requests from it.
"""

from typing import Any

from django.conf import settings
from django.http import Http404, HttpRequest, JsonResponse
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_GET

from apps.web.restaurant.catalog import MenuCatalog, default_catalog
from apps.web.restaurant.serializers import (
    MenuCategorySchema,
    MenuItemResponse,
    MenuItemSchema,
    MenuResponse,
)


def _cors_headers() -> dict[str, str]:
    """CORS headers for storefront access."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def _json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in _cors_headers().items():
        response[key] = value
    return response


def _serialize_catalog(catalog: MenuCatalog) -> list[MenuCategorySchema]:
    return [
        MenuCategorySchema(
            id=category,
            label=catalog.category_label(category),
            items=[
                MenuItemSchema.model_validate(item)
                for item in catalog.items_in_category(category)
            ],
        )
        for category in catalog.categories()
    ]


@require_GET
@cache_control(max_age=300, public=True)  # 5 minutes
def menu_list(_request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/menu

    Returns the menu grouped by category, in display order.
    """
    response = MenuResponse(
        restaurant_slug=slug,
        currency=settings.PAYMENT_CURRENCY,
        categories=_serialize_catalog(default_catalog),
    )
    return _json_response(response.model_dump(mode="json"))


@require_GET
@cache_control(max_age=300, public=True)  # 5 minutes
def menu_item_detail(_request: HttpRequest, slug: str, item_slug: str) -> JsonResponse:
    """
    GET /api/restaurants/{slug}/menu/{item_slug}

    Returns a single dish by its slug.
    """
    item = default_catalog.get_by_slug(item_slug)
    if item is None:
        raise Http404(f"Dish '{item_slug}' not found")

    response = MenuItemResponse(
        restaurant_slug=slug,
        currency=settings.PAYMENT_CURRENCY,
        category=default_catalog.category_label(item.category),
        item=MenuItemSchema.model_validate(item),
    )
    return _json_response(response.model_dump(mode="json"))
