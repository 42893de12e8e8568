"""
SQL Order Store

Production implementation on the SQLAlchemy async engine.
Used when STORAGE_BACKEND=sql.

Each call runs in its own session; status updates are a single
read-modify-commit on one row, so concurrent updates resolve as
last-write-wins.

Author: Khalil Bannouri
Version: 4.0.0
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import DependencyError, NotFoundError
from app.models import OrderRecord, OrderStatus
from app.services.orders.base import (
    BaseOrderStore,
    LineItem,
    NewOrder,
    Order,
    next_timestamp,
)

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_order(record: OrderRecord) -> Order:
    return Order(
        id=record.id,
        table_no=record.table_no,
        items=[LineItem.from_dict(i) for i in json.loads(record.items)],
        total=record.total,
        status=record.status,
        estimated_time=record.estimated_time,
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


class SqlOrderStore(BaseOrderStore):
    """Order store backed by the `orders` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        logger.info("SqlOrderStore initialized")

    @property
    def backend_name(self) -> str:
        return "sql"

    async def create(self, new_order: NewOrder) -> Order:
        now = next_timestamp(None)
        record = OrderRecord(
            table_no=new_order.table_no,
            items=json.dumps([item.to_dict() for item in new_order.items]),
            total=new_order.total,
            status=new_order.status,
            estimated_time=new_order.estimated_time,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._session_maker() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
                return _to_order(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to store order for table {new_order.table_no}: {e}")
            raise DependencyError("Order storage unavailable") from e

    async def get_by_id(self, order_id: int) -> Order:
        try:
            async with self._session_maker() as session:
                record = await session.get(OrderRecord, order_id)
                if record is None:
                    raise NotFoundError(f"Order #{order_id} not found")
                return _to_order(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load order #{order_id}: {e}")
            raise DependencyError("Order storage unavailable") from e

    async def find_all(
        self,
        status: Optional[OrderStatus] = None,
        table_no: Optional[int] = None,
    ) -> list[Order]:
        query = select(OrderRecord).order_by(
            OrderRecord.created_at.desc(), OrderRecord.id.desc()
        )
        if status is not None:
            query = query.where(OrderRecord.status == status)
        if table_no is not None:
            query = query.where(OrderRecord.table_no == table_no)

        try:
            async with self._session_maker() as session:
                result = await session.execute(query)
                return [_to_order(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception(f"Failed to list orders: {e}")
            raise DependencyError("Order storage unavailable") from e

    async def update_status(self, order_id: int, status: OrderStatus) -> Order:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    record = await session.get(
                        OrderRecord, order_id, with_for_update=True
                    )
                    if record is None:
                        raise NotFoundError(f"Order #{order_id} not found")
                    record.status = status
                    record.updated_at = next_timestamp(_aware(record.updated_at))
                return _to_order(record)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to update order #{order_id}: {e}")
            raise DependencyError("Order storage unavailable") from e

    async def health_check(self) -> bool:
        try:
            async with self._session_maker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Order storage health check failed: {e}")
            return False
