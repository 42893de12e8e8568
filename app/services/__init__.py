"""
                        Services Module

Contains the business logic with the base/implementation/factory pattern.
Stores have an in-memory and a SQL implementation chosen by STORAGE_BACKEND.

Services:
    - orders: order storage (memory / sql)
    - menu: menu catalog storage (memory / sql)
    - realtime: room-based websocket fan-out
    - order_service: order lifecycle and notifications
"""

from app.services.order_service import OrderService, get_order_service

__all__ = ["OrderService", "get_order_service"]
