"""
Order Service

Business logic for the order lifecycle:
    - validates and places table orders
    - estimates preparation time
    - moves orders through their status
    - tells the kitchen and the table about every change

Lifecycle:
    pending -> confirmed -> preparing -> ready -> served
    cancelled is reachable from any non-terminal status.

Transitions are NOT checked: any recognized status may be set from
any other (e.g. pending straight to served).

Author: Khalil Bannouri
Version: 4.0.0
"""

import logging
import math
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, Optional

from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models import OrderStatus
from app.services.orders import BaseOrderStore, LineItem, NewOrder, Order, get_order_store
from app.services.realtime import RealtimeNotifier, get_notifier, table_room

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED})


def is_terminal(status: OrderStatus) -> bool:
    """Served and cancelled orders are not expected to move again."""
    return status in TERMINAL_STATUSES


def parse_status(value: Any, field: str = "status") -> OrderStatus:
    """Map a client-supplied status string to OrderStatus."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        valid = [s.value for s in OrderStatus]
        raise ValidationError(f"Invalid status. Options: {valid}", field=field)


def _is_number(value: Any) -> bool:
    # Rejects bool, NaN and Infinity
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_line_item(index: int, raw: Any) -> LineItem:
    field = f"items[{index}]"
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{field} must be an object", field=field)

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Missing required field: {field}.name", field=f"{field}.name")

    price = raw.get("price")
    if not _is_number(price) or price < 0:
        raise ValidationError(
            f"{field}.price must be a non-negative number", field=f"{field}.price"
        )

    quantity = raw.get("quantity")
    if not _is_int(quantity) or quantity < 1:
        raise ValidationError(
            f"{field}.quantity must be an integer of at least 1", field=f"{field}.quantity"
        )

    prep_time = raw.get("prepTime", raw.get("prep_time"))
    if prep_time is not None and (not _is_number(prep_time) or prep_time < 0):
        raise ValidationError(
            f"{field}.prepTime must be a non-negative number", field=f"{field}.prepTime"
        )

    return LineItem(
        name=name.strip(),
        price=price,
        quantity=quantity,
        category=raw.get("category"),
        prep_time=math.ceil(prep_time) if prep_time is not None else None,
    )


class OrderService:
    """
    Places orders and transitions their status.

    Store writes always happen before notifications; a notification
    failure is logged and never fails the request.
    """

    def __init__(
        self,
        store: BaseOrderStore,
        notifier: RealtimeNotifier,
        default_prep_time: int = 15,
        prep_time_buffer: int = 5,
    ):
        self.store = store
        self.notifier = notifier
        self.default_prep_time = default_prep_time
        self.prep_time_buffer = prep_time_buffer

    # =========================================================================
    # VALIDATION & ESTIMATES
    # =========================================================================

    def validate_order(self, table_no: Any, items: Any, total: Any) -> NewOrder:
        """
        Check a placement request and build the order to store.

        Raises:
            ValidationError: With `field` set to the first bad input
        """
        if table_no is None:
            raise ValidationError("Missing required field: tableNo", field="tableNo")
        if not _is_int(table_no) or table_no <= 0:
            raise ValidationError("tableNo must be a positive integer", field="tableNo")

        if items is None:
            raise ValidationError("Missing required field: items", field="items")
        if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
            raise ValidationError("items must be a list", field="items")
        if len(items) == 0:
            raise ValidationError("items must contain at least one item", field="items")
        line_items = [_parse_line_item(i, raw) for i, raw in enumerate(items)]

        if total is None:
            raise ValidationError("Missing required field: total", field="total")
        if not _is_number(total) or total <= 0:
            raise ValidationError("total must be a positive number", field="total")

        expected = round(sum(item.line_total for item in line_items), 2)
        if abs(expected - total) > 0.01:
            logger.warning(
                f"Table {table_no}: total {total} does not match line items ({expected})"
            )

        return NewOrder(
            table_no=table_no,
            items=line_items,
            total=total,
            estimated_time=self.estimate_prep_time(line_items),
        )

    def estimate_prep_time(self, items: Sequence[LineItem]) -> int:
        """Slowest item (default for items without a prep time) plus the fixed buffer."""
        slowest = max(item.prep_time or self.default_prep_time for item in items)
        return slowest + self.prep_time_buffer

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def place_order(self, table_no: Any, items: Any, total: Any) -> Order:
        """
        Create a pending order and announce it.

        Publishes `newOrder` to the kitchen and `orderConfirmed` to the
        table, both with the full order snapshot.
        """
        new_order = self.validate_order(table_no, items, total)
        order = await self.store.create(new_order)

        logger.info(
            f"Order #{order.id} placed for table {order.table_no} "
            f"({len(order.items)} items, ~{order.estimated_time} min)"
        )

        snapshot = order.to_dict()
        await self._publish(self.notifier.kitchen_room, "newOrder", snapshot)
        await self._publish(table_room(order.table_no), "orderConfirmed", snapshot)
        return order

    async def get_order(self, order_id: int) -> Order:
        return await self.store.get_by_id(order_id)

    async def list_orders(
        self,
        status: Optional[Any] = None,
        table_no: Optional[int] = None,
    ) -> list[Order]:
        """Orders matching the optional filters, newest first."""
        status_filter = parse_status(status) if status is not None else None
        return await self.store.find_all(status=status_filter, table_no=table_no)

    async def update_status(self, order_id: int, new_status: Any) -> Order:
        """
        Set a new status and notify the table and the kitchen.

        Raises:
            ValidationError: Unrecognized status (nothing is written)
            NotFoundError: No order with this id
        """
        status = parse_status(new_status)
        order = await self.store.update_status(order_id, status)

        logger.info(f"Order #{order.id} (table {order.table_no}) -> {status.value}")

        await self._publish(
            table_room(order.table_no),
            "orderStatusUpdate",
            {
                "orderId": order.id,
                "status": order.status.value,
                "updatedAt": order.updated_at.isoformat(),
            },
        )
        await self._publish(
            self.notifier.kitchen_room,
            "orderStatusUpdated",
            {"orderId": order.id, "status": order.status.value},
        )
        return order

    async def _publish(self, room: str, event: str, payload: dict[str, Any]) -> None:
        try:
            await self.notifier.publish(room, event, payload)
        except Exception:
            logger.exception(f"Failed to publish {event} to {room}")


@lru_cache()
def get_order_service() -> OrderService:
    """Get the order service wired to the configured store and notifier."""
    settings = get_settings()
    return OrderService(
        store=get_order_store(),
        notifier=get_notifier(),
        default_prep_time=settings.default_prep_time_minutes,
        prep_time_buffer=settings.prep_time_buffer_minutes,
    )


def reset_order_service() -> None:
    get_order_service.cache_clear()
