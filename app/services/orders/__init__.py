"""
Order Store Factory

Provides a single entry point for obtaining the order store.
Selects InMemoryOrderStore or SqlOrderStore based on STORAGE_BACKEND.

Usage:
    from app.services.orders import get_order_store

    store = get_order_store()
    order = await store.get_by_id(42)

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.database import get_session_maker
from app.services.orders.base import (
    BaseOrderStore,
    LineItem,
    NewOrder,
    Order,
)
from app.services.orders.memory import InMemoryOrderStore
from app.services.orders.sql import SqlOrderStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_order_store() -> BaseOrderStore:
    """
    Get the configured order store instance.

    Returns:
        BaseOrderStore: Shared store for the process
    """
    settings = get_settings()

    if settings.uses_sql_storage:
        logger.info("Order Store: Using SqlOrderStore")
        return SqlOrderStore(get_session_maker())

    logger.info("Order Store: Using InMemoryOrderStore")
    return InMemoryOrderStore()


def reset_order_store() -> None:
    """
    Clear the cached store instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_order_store.cache_clear()
    logger.debug("Order store cache cleared")


__all__ = [
    "get_order_store",
    "reset_order_store",
    "BaseOrderStore",
    "InMemoryOrderStore",
    "SqlOrderStore",
    "LineItem",
    "NewOrder",
    "Order",
]
