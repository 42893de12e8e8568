"""
In-Memory Menu Store

Catalog held in a dict, seeded from the bundled menu on construction.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

from app.core.exceptions import NotFoundError
from app.models import MenuCategory
from app.services.menu.base import (
    BaseMenuStore,
    MenuItem,
    menu_item_from_seed,
    sort_for_display,
)

logger = logging.getLogger(__name__)


class InMemoryMenuStore(BaseMenuStore):
    """Menu store backed by a dict keyed by item id."""

    def __init__(self, items: Optional[list[dict[str, Any]]] = None):
        self._items: dict[int, MenuItem] = {}
        if items:
            self._load(items)
        logger.info(f"InMemoryMenuStore initialized ({len(self._items)} items)")

    @property
    def backend_name(self) -> str:
        return "memory"

    def _load(self, items: list[dict[str, Any]]) -> None:
        self._items = {
            i: menu_item_from_seed(i, data) for i, data in enumerate(items, start=1)
        }

    async def list_available(
        self,
        category: Optional[MenuCategory] = None,
    ) -> list[MenuItem]:
        items = [
            item for item in self._items.values()
            if item.available and (category is None or item.category == category)
        ]
        return [replace(item) for item in sort_for_display(items)]

    async def get_by_id(self, item_id: int) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(f"Menu item #{item_id} not found")
        return replace(item)

    async def seed(self, items: list[dict[str, Any]]) -> int:
        self._load(items)
        logger.info(f"Menu seeded with {len(self._items)} items")
        return len(self._items)

    async def count(self) -> int:
        return len(self._items)
