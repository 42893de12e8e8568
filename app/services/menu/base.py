"""
Menu Store Abstract Base Class

Read-mostly catalog of orderable items. Items are only replaced
wholesale through seed(); availability toggling is not handled here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from app.core.exceptions import ValidationError
from app.models import MenuCategory


@dataclass
class MenuItem:
    """Orderable dish or drink."""
    id: int
    name: str
    price: float
    category: MenuCategory
    available: bool = True
    description: Optional[str] = None
    image: Optional[str] = None
    rating: float = 4.5
    prep_time: Optional[int] = None
    is_veg: bool = False
    spice_level: int = 0
    popular: bool = False
    chef_special: bool = False


def menu_item_from_seed(item_id: int, data: dict[str, Any]) -> MenuItem:
    return MenuItem(
        id=item_id,
        name=data["name"],
        price=data["price"],
        category=MenuCategory(data["category"]),
        available=data.get("available", True),
        description=data.get("description"),
        image=data.get("image"),
        rating=data.get("rating", 4.5),
        prep_time=data.get("prep_time"),
        is_veg=data.get("is_veg", False),
        spice_level=data.get("spice_level", 0),
        popular=data.get("popular", False),
        chef_special=data.get("chef_special", False),
    )


def parse_category(category: Optional[str]) -> Optional[MenuCategory]:
    """Turn a query-string category into MenuCategory (None passes through)."""
    if category is None:
        return None
    try:
        return MenuCategory(category.lower())
    except ValueError:
        valid = [c.value for c in MenuCategory]
        raise ValidationError(
            f"Invalid category. Options: {valid}", field="category"
        )


def sort_for_display(items: list[MenuItem]) -> list[MenuItem]:
    """Popular items first, then best rated."""
    return sorted(items, key=lambda i: (i.popular, i.rating), reverse=True)


class BaseMenuStore(ABC):
    """Abstract base class for menu storage."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        pass

    @abstractmethod
    async def list_available(
        self,
        category: Optional[MenuCategory] = None,
    ) -> list[MenuItem]:
        """
        List items that can currently be ordered.

        Args:
            category: Only items from this section

        Returns:
            Items sorted popular first, then by rating
        """
        pass

    @abstractmethod
    async def get_by_id(self, item_id: int) -> MenuItem:
        """
        Fetch one menu item.

        Raises:
            NotFoundError: If no item has this id
        """
        pass

    @abstractmethod
    async def seed(self, items: list[dict[str, Any]]) -> int:
        """
        Replace the whole catalog.

        Args:
            items: Seed records (see app.services.menu.seed_data)

        Returns:
            Number of items now in the catalog
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
