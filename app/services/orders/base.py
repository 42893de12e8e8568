"""
Order Store Abstract Base Class

Defines the storage contract shared by every order backend.
Both InMemoryOrderStore and SqlOrderStore implement these methods;
which one runs is decided by STORAGE_BACKEND at composition time.

Contract:
    - create() assigns the id and both timestamps
    - update_status() moves updated_at strictly forward
    - find_all() returns newest orders first
    - missing ids raise NotFoundError

Author: Khalil Bannouri
Version: 4.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from app.models import OrderStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """Current time, nudged past `previous` if the clock has not moved."""
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


@dataclass
class LineItem:
    """Single ordered dish."""
    name: str
    price: float
    quantity: int
    category: Optional[str] = None
    prep_time: Optional[int] = None

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "category": self.category,
            "prepTime": self.prep_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            name=data["name"],
            price=data["price"],
            quantity=data["quantity"],
            category=data.get("category"),
            prep_time=data.get("prepTime", data.get("prep_time")),
        )


@dataclass
class NewOrder:
    """Validated order waiting for an id and timestamps."""
    table_no: int
    items: list[LineItem]
    total: float
    estimated_time: int
    status: OrderStatus = OrderStatus.PENDING


@dataclass
class Order:
    """
    Persisted order snapshot.

    Attributes:
        id: Store-assigned identity, never changes
        table_no: Table the order belongs to
        items: Ordered line items
        total: Amount as sent by the client
        status: Current lifecycle status
        estimated_time: Minutes until the order should be ready
        created_at: Placement time (UTC)
        updated_at: Last status change (UTC), never before created_at
    """
    id: int
    table_no: int
    items: list[LineItem]
    total: float
    status: OrderStatus
    estimated_time: int
    created_at: datetime
    updated_at: datetime = field(default=None)

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape pushed to realtime clients."""
        return {
            "id": self.id,
            "tableNo": self.table_no,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "status": self.status.value,
            "estimatedTime": self.estimated_time,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class BaseOrderStore(ABC):
    """
    Abstract base class for order storage.

    Example:
        >>> store = get_order_store()
        >>> order = await store.create(new_order)
        >>> order = await store.update_status(order.id, OrderStatus.READY)
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """
        Return the name of the storage backend.

        Returns:
            str: Backend name (e.g., "memory", "sql")
        """
        pass

    @abstractmethod
    async def create(self, new_order: NewOrder) -> Order:
        """
        Persist a new order.

        Args:
            new_order: Validated order data

        Returns:
            Order: Stored order with id and timestamps populated
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order:
        """
        Fetch a single order.

        Raises:
            NotFoundError: If no order has this id
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        status: Optional[OrderStatus] = None,
        table_no: Optional[int] = None,
    ) -> list[Order]:
        """
        List orders matching the optional filters, newest first.

        Args:
            status: Only orders currently in this status
            table_no: Only orders from this table
        """
        pass

    @abstractmethod
    async def update_status(self, order_id: int, status: OrderStatus) -> Order:
        """
        Set the status of an existing order and bump updated_at.

        Raises:
            NotFoundError: If no order has this id
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check that the backend is reachable."""
        pass
