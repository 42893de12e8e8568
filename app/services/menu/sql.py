"""
SQL Menu Store

Catalog in the `menu_items` table. Seeded on startup when empty.
"""

import logging
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import DependencyError, NotFoundError
from app.models import MenuCategory, MenuItemRecord
from app.services.menu.base import BaseMenuStore, MenuItem

logger = logging.getLogger(__name__)


def _to_item(record: MenuItemRecord) -> MenuItem:
    return MenuItem(
        id=record.id,
        name=record.name,
        price=record.price,
        category=record.category,
        available=record.available,
        description=record.description,
        image=record.image,
        rating=record.rating,
        prep_time=record.prep_time,
        is_veg=record.is_veg,
        spice_level=record.spice_level,
        popular=record.popular,
        chef_special=record.chef_special,
    )


class SqlMenuStore(BaseMenuStore):
    """Menu store backed by the `menu_items` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        logger.info("SqlMenuStore initialized")

    @property
    def backend_name(self) -> str:
        return "sql"

    async def list_available(
        self,
        category: Optional[MenuCategory] = None,
    ) -> list[MenuItem]:
        query = (
            select(MenuItemRecord)
            .where(MenuItemRecord.available.is_(True))
            .order_by(MenuItemRecord.popular.desc(), MenuItemRecord.rating.desc())
        )
        if category is not None:
            query = query.where(MenuItemRecord.category == category)

        try:
            async with self._session_maker() as session:
                result = await session.execute(query)
                return [_to_item(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception(f"Failed to list menu: {e}")
            raise DependencyError("Menu storage unavailable") from e

    async def get_by_id(self, item_id: int) -> MenuItem:
        try:
            async with self._session_maker() as session:
                record = await session.get(MenuItemRecord, item_id)
                if record is None:
                    raise NotFoundError(f"Menu item #{item_id} not found")
                return _to_item(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load menu item #{item_id}: {e}")
            raise DependencyError("Menu storage unavailable") from e

    async def seed(self, items: list[dict[str, Any]]) -> int:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    await session.execute(delete(MenuItemRecord))
                    session.add_all([
                        MenuItemRecord(
                            name=data["name"],
                            description=data.get("description"),
                            price=data["price"],
                            category=MenuCategory(data["category"]),
                            image=data.get("image"),
                            available=data.get("available", True),
                            rating=data.get("rating", 4.5),
                            prep_time=data.get("prep_time"),
                            is_veg=data.get("is_veg", False),
                            spice_level=data.get("spice_level", 0),
                            popular=data.get("popular", False),
                            chef_special=data.get("chef_special", False),
                        )
                        for data in items
                    ])
        except SQLAlchemyError as e:
            logger.exception(f"Failed to seed menu: {e}")
            raise DependencyError("Menu storage unavailable") from e

        logger.info(f"Menu seeded with {len(items)} items")
        return len(items)

    async def count(self) -> int:
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(func.count(MenuItemRecord.id)))
                return result.scalar() or 0
        except SQLAlchemyError as e:
            logger.exception(f"Failed to count menu items: {e}")
            raise DependencyError("Menu storage unavailable") from e
