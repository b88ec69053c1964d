"""Admin for restaurants and their staff."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count, QuerySet
from django.http import HttpRequest

from .models import Client, User


class StaffInline(admin.TabularInline):  # type: ignore[type-arg]
    model = User
    fk_name = "client"
    extra = 0
    fields = ["username", "email", "role", "is_active"]
    readonly_fields = ["username", "email"]
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request: HttpRequest, obj: Client | None = None) -> bool:
        # Users are created from the user admin, which sets a password
        return False


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Restaurants, with staff inline and an order count."""

    list_display = ["name", "slug", "email", "is_active", "order_count", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug", "email"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at", "updated_at"]
    inlines = [StaffInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Client]:
        return super().get_queryset(request).annotate(_order_count=Count("orders"))

    @admin.display(description="Orders", ordering="_order_count")
    def order_count(self, obj: Client) -> int:
        return obj._order_count  # type: ignore[attr-defined]


@admin.register(User)
class UserAdmin(BaseUserAdmin):  # type: ignore[type-arg]
    list_display = ["username", "email", "client", "role", "is_superuser", "is_active"]
    list_filter = ["role", "client", "is_superuser", "is_active"]
    list_select_related = ["client"]
    search_fields = ["username", "email", "client__slug"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,  # type: ignore[misc]
        ("Restaurant access", {"fields": ("client", "role")}),
    )
    add_fieldsets = (
        *BaseUserAdmin.add_fieldsets,
        ("Restaurant access", {"fields": ("client", "role")}),
    )
