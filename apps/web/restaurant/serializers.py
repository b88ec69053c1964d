"""
Pydantic schemas for restaurant API responses.

These schemas define the public API contract for menu and order data.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Menu
# =============================================================================


class MenuItemSchema(BaseModel):
    """A menu item as shown to shoppers."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    slug: str
    description: str
    price: Decimal
    image: str


class MenuCategorySchema(BaseModel):
    """A category with its items."""

    id: str
    label: str
    items: list[MenuItemSchema] = Field(default_factory=list)


class MenuResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}/menu."""

    restaurant_slug: str
    currency: str
    categories: list[MenuCategorySchema]


class MenuItemResponse(BaseModel):
    """Response for GET /api/restaurants/{slug}/menu/{item_slug}."""

    restaurant_slug: str
    currency: str
    category: str
    item: MenuItemSchema


# =============================================================================
# Orders
# =============================================================================


class OrderItemSchema(BaseModel):
    """A line item snapshot."""

    model_config = ConfigDict(from_attributes=True)

    item_name: str
    quantity: int
    price: Decimal


class OrderSchema(BaseModel):
    """An order with its line items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_slug: str | None
    customer_name: str | None
    phone_number: str | None
    total_price: Decimal
    status: str
    created_at: datetime
    items: list[OrderItemSchema] = Field(default_factory=list)
