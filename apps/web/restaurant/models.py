"""
Restaurant models - Orders and their line items.

Orders are created by payment reconciliation, never directly by shoppers.
Line items are snapshots of what was charged, not references to the menu.
"""

from decimal import Decimal

from django.db import models

from apps.web.core.models import TenantScopedModel


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PAID = "paid", "Paid"
    PENDING = "pending", "Pending"
    CANCELLED = "cancelled", "Cancelled"


class Order(TenantScopedModel):
    """
    Customer order.

    One Order exists per reconciled checkout session. The restaurant slug is
    kept even when it resolves to no tenant.
    """

    restaurant_slug = models.SlugField(
        null=True,
        blank=True,
        help_text="Slug the checkout was started from",
    )

    # Customer information (collected by the payment processor)
    customer_name = models.CharField(max_length=200, null=True, blank=True)
    phone_number = models.CharField(max_length=40, null=True, blank=True)

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text="Amount charged, in major currency units",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["tenant", "created_at"], name="order_tenant_created_idx"
            ),
            models.Index(
                fields=["restaurant_slug", "created_at"], name="order_slug_created_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk} - {self.customer_name or 'guest'}"


class OrderItem(models.Model):
    """
    Line item in an order.

    Stores a snapshot of name and price at checkout time; catalog prices
    may change afterwards.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Unit price charged",
    )

    class Meta:
        db_table = "order_items"
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_name}"

    @property
    def line_total(self) -> Decimal:
        # Unsaved rows (e.g. the admin inline's blank form) have no price yet
        if self.price is None or self.quantity is None:
            return Decimal("0")
        return self.price * self.quantity
