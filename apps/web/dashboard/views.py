"""
Dashboard views - order data for restaurant admins.

JSON only; the dashboard front end renders it.
"""

from decimal import Decimal

from django.db.models import Prefetch, Sum
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from apps.web.core.decorators import role_required
from apps.web.core.models import User
from apps.web.restaurant.models import Order, OrderItem, OrderStatus
from apps.web.restaurant.serializers import OrderItemSchema, OrderSchema


def _serialize_order(order: Order) -> OrderSchema:
    return OrderSchema(
        id=order.pk,
        restaurant_slug=order.restaurant_slug,
        customer_name=order.customer_name,
        phone_number=order.phone_number,
        total_price=order.total_price,
        status=order.status,
        created_at=order.created_at,
        items=[OrderItemSchema.model_validate(item) for item in order.items.all()],
    )


@require_GET
@role_required(User.Role.ADMIN)
def orders_today(request: HttpRequest) -> JsonResponse:
    """
    GET /dashboard/api/orders/today

    Today's orders (server time zone) for the signed-in user's restaurant,
    newest first, with order count and paid revenue.
    """
    start_of_day = timezone.localtime().replace(
        hour=0, minute=0, second=0, microsecond=0
    )

    try:
        orders = Order.objects.for_client(request)
    except ValueError:
        return JsonResponse({"error": "No restaurant assigned"}, status=403)

    orders = orders.filter(created_at__gte=start_of_day).prefetch_related(
        Prefetch("items", queryset=OrderItem.objects.order_by("pk"))
    )

    revenue = orders.filter(status=OrderStatus.PAID).aggregate(
        total=Sum("total_price")
    )["total"] or Decimal("0")

    return JsonResponse(
        {
            "date": start_of_day.date().isoformat(),
            "count": len(orders),
            "revenue": str(revenue),
            "orders": [_serialize_order(order).model_dump(mode="json") for order in orders],
        }
    )
