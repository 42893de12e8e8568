"""
Menu Store Factory

Returns the in-memory or SQL menu store based on STORAGE_BACKEND.
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.database import get_session_maker
from app.services.menu.base import BaseMenuStore, MenuItem, parse_category
from app.services.menu.memory import InMemoryMenuStore
from app.services.menu.seed_data import MENU_SEED
from app.services.menu.sql import SqlMenuStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_menu_store() -> BaseMenuStore:
    """Get the configured menu store."""
    settings = get_settings()

    if settings.uses_sql_storage:
        logger.info("Menu Store: Using SqlMenuStore")
        return SqlMenuStore(get_session_maker())

    logger.info("Menu Store: Using InMemoryMenuStore")
    return InMemoryMenuStore(MENU_SEED)


async def ensure_menu_seeded(store: BaseMenuStore) -> int:
    """Seed the bundled catalog into an empty store. Returns the item count."""
    count = await store.count()
    if count == 0:
        return await store.seed(MENU_SEED)
    logger.info(f"Found {count} existing menu items")
    return count


def reset_menu_store() -> None:
    """Clear the cached store instance."""
    get_menu_store.cache_clear()


__all__ = [
    "get_menu_store",
    "reset_menu_store",
    "ensure_menu_seeded",
    "parse_category",
    "BaseMenuStore",
    "MenuItem",
    "InMemoryMenuStore",
    "SqlMenuStore",
    "MENU_SEED",
]
