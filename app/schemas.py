"""
Pydantic Schemas for Request/Response Validation

Field names are snake_case in Python and camelCase on the wire
(tableNo, estimatedTime, createdAt, ...), matching the table and
kitchen frontends.

Request schemas only check JSON types, strictly (no bool or string
coercion). Presence and range rules live in OrderService so every
caller gets the same ValidationError.

Author: Khalil Bannouri
Version: 4.0.0
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from app.models import MenuCategory, OrderStatus

# JSON numbers only; no coercion from bool or numeric strings
Number = Union[StrictInt, StrictFloat]


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderItemCreate(CamelModel):
    """Single item in an order."""
    name: Optional[str] = Field(None, examples=["Margherita Pizza"])
    price: Optional[Number] = Field(None, examples=[349])
    quantity: Optional[StrictInt] = Field(None, examples=[2])
    category: Optional[str] = Field(None, examples=["main"])
    prep_time: Optional[Number] = Field(None, examples=[20])


class OrderCreate(CamelModel):
    """Request schema for placing a table order."""
    table_no: Optional[StrictInt] = Field(None, examples=[4])
    items: Optional[List[OrderItemCreate]] = None
    total: Optional[Number] = Field(None, examples=[698])


class OrderStatusUpdate(CamelModel):
    """Request schema for moving an order to a new status."""
    status: Optional[str] = Field(None, examples=["preparing"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class LineItemResponse(CamelModel):
    name: str
    price: float
    quantity: int
    category: Optional[str] = None
    prep_time: Optional[int] = None


class OrderResponse(CamelModel):
    """Response schema for a single order."""
    id: int
    table_no: int
    items: List[LineItemResponse]
    total: float
    status: OrderStatus
    estimated_time: int
    created_at: datetime
    updated_at: datetime


class OrderEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: OrderResponse


class OrderListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[OrderResponse]


class MenuItemResponse(CamelModel):
    """Response schema for a menu item."""
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: MenuCategory
    image: Optional[str] = None
    available: bool
    rating: float
    prep_time: Optional[int] = None
    is_veg: bool
    spice_level: int
    popular: bool
    chef_special: bool


class MenuItemEnvelope(CamelModel):
    success: bool = True
    data: MenuItemResponse


class MenuListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[MenuItemResponse]


class SeedMenuResponse(CamelModel):
    success: bool = True
    message: str
    count: int


class RestaurantInfo(CamelModel):
    name: str
    hours: str
    location: str
    specialties: List[str]


class RestaurantInfoResponse(CamelModel):
    success: bool = True
    restaurant: RestaurantInfo


class ErrorResponse(CamelModel):
    """Standard error response."""
    success: bool = False
    error: str
    field: Optional[str] = None
    detail: Optional[str] = None


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    storage: str
    database: str
    realtime_connections: int
    timestamp: datetime
