"""Admin registration for restaurant models."""

from django.contrib import admin

from apps.web.restaurant.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):  # type: ignore[type-arg]
    """Inline for items within an order."""

    model = OrderItem
    extra = 0
    fields = ["item_name", "quantity", "price", "line_total"]
    readonly_fields = ["item_name", "quantity", "price", "line_total"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Admin for orders."""

    list_display = [
        "id",
        "restaurant_slug",
        "tenant",
        "customer_name",
        "total_price",
        "status",
        "created_at",
    ]
    list_filter = ["status", "tenant"]
    search_fields = ["customer_name", "phone_number", "restaurant_slug"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
