"""
In-Memory Order Store

Keeps orders in a process-local dict. Used when STORAGE_BACKEND=memory,
for local development and tests. Orders are lost on restart.
"""

import asyncio
import itertools
import logging
from dataclasses import replace
from typing import Optional

from app.core.exceptions import NotFoundError
from app.models import OrderStatus
from app.services.orders.base import (
    BaseOrderStore,
    NewOrder,
    Order,
    next_timestamp,
)

logger = logging.getLogger(__name__)


def _copy(order: Order) -> Order:
    return replace(order, items=[replace(item) for item in order.items])


class InMemoryOrderStore(BaseOrderStore):
    """Order store backed by a dict, writes serialized by an asyncio lock."""

    def __init__(self):
        self._orders: dict[int, Order] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        logger.info("InMemoryOrderStore initialized")

    @property
    def backend_name(self) -> str:
        return "memory"

    async def create(self, new_order: NewOrder) -> Order:
        async with self._lock:
            now = next_timestamp(None)
            order = Order(
                id=next(self._ids),
                table_no=new_order.table_no,
                items=[replace(item) for item in new_order.items],
                total=new_order.total,
                status=new_order.status,
                estimated_time=new_order.estimated_time,
                created_at=now,
                updated_at=now,
            )
            self._orders[order.id] = order
        logger.debug(f"Stored order #{order.id} in memory")
        return _copy(order)

    async def get_by_id(self, order_id: int) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")
        return _copy(order)

    async def find_all(
        self,
        status: Optional[OrderStatus] = None,
        table_no: Optional[int] = None,
    ) -> list[Order]:
        orders = [
            o for o in self._orders.values()
            if (status is None or o.status == status)
            and (table_no is None or o.table_no == table_no)
        ]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return [_copy(o) for o in orders]

    async def update_status(self, order_id: int, status: OrderStatus) -> Order:
        async with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise NotFoundError(f"Order #{order_id} not found")
            updated = replace(
                current,
                status=status,
                updated_at=next_timestamp(current.updated_at),
            )
            self._orders[order_id] = updated
        return _copy(updated)

    async def health_check(self) -> bool:
        return True
