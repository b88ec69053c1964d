"""
Menu catalog - the server-side source of truth for item identity and price.

The catalog is built once at import and never mutated, so it is shared by
all requests without locking. Client-submitted names are only ever used as
lookup keys; prices always come from here.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from apps.web.restaurant.menu import CATEGORY_LABELS, CATEGORY_ORDER, MENU_ITEMS


class MenuItem(BaseModel):
    """A canonical catalog entry."""

    model_config = ConfigDict(frozen=True)

    category: str
    title: str
    slug: str
    price: Decimal = Field(ge=0)
    description: str = ""
    image: str = ""


def _key(value: str) -> str:
    return value.strip().lower()


class MenuCatalog:
    """
    Immutable lookup over the menu.

    Titles and slugs are indexed case-insensitively; both must be unique.
    """

    def __init__(
        self,
        items: Iterable[MenuItem],
        category_order: Iterable[str] = (),
        category_labels: dict[str, str] | None = None,
    ) -> None:
        self._items = tuple(items)
        self._category_order = list(category_order)
        self._category_labels = dict(category_labels or {})
        self._by_title: dict[str, MenuItem] = {}
        self._by_slug: dict[str, MenuItem] = {}

        for item in self._items:
            title_key, slug_key = _key(item.title), _key(item.slug)
            if title_key in self._by_title:
                raise ValueError(f"Duplicate menu title: {item.title}")
            if slug_key in self._by_slug:
                raise ValueError(f"Duplicate menu slug: {item.slug}")
            self._by_title[title_key] = item
            self._by_slug[slug_key] = item

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[dict[str, Any]],
        category_order: Iterable[str] = (),
        category_labels: dict[str, str] | None = None,
    ) -> "MenuCatalog":
        """Build a catalog from plain dict definitions."""
        return cls(
            (MenuItem.model_validate(d) for d in definitions),
            category_order=category_order,
            category_labels=category_labels,
        )

    @property
    def items(self) -> tuple[MenuItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def resolve(self, name: str, slug: str | None = None) -> MenuItem | None:
        """
        Resolve a client-submitted item to its catalog entry.

        Tries the title first (case-insensitive, trimmed), then the slug.

        Returns:
            The MenuItem, or None if neither key matches
        """
        item = self._by_title.get(_key(name)) if name else None
        if item is not None:
            return item

        if slug:
            return self._by_slug.get(_key(slug))

        return None

    def get_by_slug(self, slug: str) -> MenuItem | None:
        return self._by_slug.get(_key(slug))

    def categories(self) -> list[str]:
        """
        Unique categories in display order.

        Categories missing from the configured order come last, in the
        order they first appear in the menu.
        """
        seen = list(dict.fromkeys(item.category for item in self._items))
        known = [c for c in self._category_order if c in seen]
        unknown = [c for c in seen if c not in self._category_order]
        return known + unknown

    def category_label(self, category: str) -> str:
        return self._category_labels.get(category, category)

    def items_in_category(self, category: str) -> list[MenuItem]:
        return [item for item in self._items if item.category == category]


default_catalog = MenuCatalog.from_definitions(
    MENU_ITEMS,
    category_order=CATEGORY_ORDER,
    category_labels=CATEGORY_LABELS,
)
