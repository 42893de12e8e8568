"""
SQLAlchemy Database Models

Tables for the SQL storage backend:
- menu_items: orderable catalog
- orders: table orders and their lifecycle status

Author: Khalil Bannouri
Version: 4.0.0
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, Integer, String, Text

from app.database import Base


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class MenuCategory(str, enum.Enum):
    """Menu sections."""
    APPETIZER = "appetizer"
    MAIN = "main"
    DESSERT = "dessert"
    BEVERAGE = "beverage"


class OrderRecord(Base):
    """
    Main Order table - stores all table orders.

    Line items are kept as a JSON string, the same way they arrive.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    table_no = Column(Integer, nullable=False, index=True)
    items = Column(Text, nullable=False)  # JSON string of ordered items
    total = Column(Float, nullable=False)

    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    estimated_time = Column(Integer, nullable=False, default=20)

    # Set from Python so both backends share the same clock rules
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Order #{self.id} - table {self.table_no} - {self.status.value}>"


class MenuItemRecord(Base):
    """Orderable dish or drink."""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    category = Column(
        Enum(MenuCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )
    image = Column(String(500), nullable=True)
    available = Column(Boolean, default=True, nullable=False)
    rating = Column(Float, default=4.5)
    prep_time = Column(Integer, nullable=True)

    # Attributes
    is_veg = Column(Boolean, default=False)
    spice_level = Column(Integer, default=0)
    popular = Column(Boolean, default=False)
    chef_special = Column(Boolean, default=False)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.category.value}>"
