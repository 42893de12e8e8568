"""
FastAPI Application Entry Point

Table Ordering Backend - menu, orders and realtime kitchen/table updates.
Storage is in-memory (development) or SQL (production), chosen by
STORAGE_BACKEND.

Endpoints:
    - GET  /api/menu: Available menu items
    - GET  /api/menu/{id}: Single menu item
    - POST /api/seed-menu: Reload the bundled menu
    - POST /api/order: Place an order
    - GET  /api/order/{id}: Get an order
    - GET  /api/orders: List orders
    - PUT  /api/order/{id}/status: Move an order to a new status
    - GET  /api/restaurant-info: Restaurant context
    - GET  /health: System health check
    - WS   /ws: Realtime updates (joinTable / joinChef)

Run: python -m app.main (binds API_HOST:API_PORT)

Author: Khalil Bannouri
Version: 4.0.0
"""

import json
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_logger, get_settings, setup_logging
from app.core.exceptions import DependencyError, OrderingError, ValidationError
from app.database import dispose_engine, get_engine, init_db
from app.schemas import (
    ErrorResponse,
    HealthResponse,
    MenuItemEnvelope,
    MenuItemResponse,
    MenuListEnvelope,
    OrderCreate,
    OrderEnvelope,
    OrderListEnvelope,
    OrderResponse,
    OrderStatusUpdate,
    RestaurantInfo,
    RestaurantInfoResponse,
    SeedMenuResponse,
)
from app.services.menu import (
    MENU_SEED,
    BaseMenuStore,
    ensure_menu_seeded,
    get_menu_store,
    parse_category,
)
from app.services.order_service import OrderService, get_order_service
from app.services.orders import get_order_store
from app.services.realtime import RealtimeNotifier, get_notifier

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    current = get_settings()

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {current.app_name}")
    logger.info(f"   Version: {current.app_version}")
    logger.info(f"   Environment: {current.env_mode.value}")
    logger.info(f"   Storage: {current.storage_backend.value}")
    logger.info(f"   Debug: {current.debug}")
    logger.info("=" * 60)

    if current.uses_sql_storage:
        await init_db(get_engine())
        logger.info("✅ Database initialized")

    menu_count = await ensure_menu_seeded(get_menu_store())
    logger.info(f"✅ Menu ready ({menu_count} items)")
    logger.info(f"✅ Order Store: {get_order_store().backend_name}")

    problems = current.validate_production_config()
    if problems:
        logger.warning(f"⚠️ Configuration problems: {problems}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await dispose_engine()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant table ordering backend with realtime kitchen and "
        "table updates over websockets."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍽️ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
        "realtime": "/ws",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    notifier: RealtimeNotifier = Depends(get_notifier),
) -> HealthResponse:
    """Verify storage is reachable and report realtime connections."""
    store = get_order_store()
    storage_ok = await store.health_check()

    if store.backend_name == "sql":
        db_status = "healthy" if storage_ok else "unhealthy"
    else:
        db_status = "not used"

    return HealthResponse(
        status="healthy" if storage_ok else "degraded",
        storage=store.backend_name,
        database=db_status,
        realtime_connections=notifier.connection_count,
        timestamp=datetime.now(timezone.utc),
    )


@app.get(
    "/api/restaurant-info",
    response_model=RestaurantInfoResponse,
    tags=["Root"],
)
async def restaurant_info() -> RestaurantInfoResponse:
    return RestaurantInfoResponse(
        restaurant=RestaurantInfo(
            name=settings.restaurant_name,
            hours=settings.restaurant_hours,
            location=settings.restaurant_location,
            specialties=settings.restaurant_specialties_list,
        )
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get(
    "/api/menu",
    response_model=MenuListEnvelope,
    tags=["Menu"],
    summary="List Menu",
)
async def list_menu(
    category: Optional[str] = Query(None),
    menu: BaseMenuStore = Depends(get_menu_store),
) -> MenuListEnvelope:
    """Available menu items, optionally filtered by category."""
    items = await menu.list_available(parse_category(category))
    return MenuListEnvelope(
        count=len(items),
        data=[MenuItemResponse.model_validate(item) for item in items],
    )


@app.get(
    "/api/menu/{item_id}",
    response_model=MenuItemEnvelope,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def get_menu_item(
    item_id: int,
    menu: BaseMenuStore = Depends(get_menu_store),
) -> MenuItemEnvelope:
    item = await menu.get_by_id(item_id)
    return MenuItemEnvelope(data=MenuItemResponse.model_validate(item))


@app.post(
    "/api/seed-menu",
    response_model=SeedMenuResponse,
    tags=["Menu"],
    summary="Reload Bundled Menu",
)
async def seed_menu(
    menu: BaseMenuStore = Depends(get_menu_store),
) -> SeedMenuResponse:
    """Replace the catalog with the bundled menu."""
    count = await menu.seed(MENU_SEED)
    return SeedMenuResponse(message="Menu seeded successfully", count=count)


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/api/order",
    response_model=OrderEnvelope,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Order",
)
async def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """
    Place a table order.

    The kitchen receives `newOrder` and the table receives
    `orderConfirmed` over the realtime socket.
    """
    logger.info(f"Creating order for table: {order_data.table_no}")

    items = (
        [item.model_dump() for item in order_data.items]
        if order_data.items is not None
        else None
    )
    order = await service.place_order(order_data.table_no, items, order_data.total)

    return OrderEnvelope(
        message="Order placed successfully",
        data=OrderResponse.model_validate(order),
    )


@app.get(
    "/api/order/{order_id}",
    response_model=OrderEnvelope,
    responses={404: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Get a specific order by ID."""
    order = await service.get_order(order_id)
    return OrderEnvelope(data=OrderResponse.model_validate(order))


@app.get(
    "/api/orders",
    response_model=OrderListEnvelope,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="List Orders",
)
async def list_orders(
    status: Optional[str] = Query(None),
    table_no: Optional[int] = Query(None, alias="tableNo"),
    service: OrderService = Depends(get_order_service),
) -> OrderListEnvelope:
    """Orders newest first, optionally filtered by status and table."""
    orders = await service.list_orders(status=status, table_no=table_no)
    return OrderListEnvelope(
        count=len(orders),
        data=[OrderResponse.model_validate(order) for order in orders],
    )


@app.put(
    "/api/order/{order_id}/status",
    response_model=OrderEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Update Order Status",
)
async def update_order_status(
    order_id: int,
    update: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = await service.update_status(order_id, update.status)
    return OrderEnvelope(
        message="Order status updated",
        data=OrderResponse.model_validate(order),
    )


# =============================================================================
# REALTIME
# =============================================================================

async def _handle_client_event(
    websocket: WebSocket,
    notifier: RealtimeNotifier,
    connection_id: str,
    message: Any,
) -> None:
    """Process one join request from a connected client."""
    event = message.get("event") if isinstance(message, dict) else None

    if event == "joinTable":
        table_no = message.get("tableNo")
        if not isinstance(table_no, int) or isinstance(table_no, bool) or table_no <= 0:
            await websocket.send_json(
                {"event": "error", "error": "tableNo must be a positive integer"}
            )
            return
        room = notifier.subscribe_table(connection_id, table_no)
    elif event in ("joinChef", "joinKitchen"):
        room = notifier.subscribe_kitchen(connection_id)
    else:
        await websocket.send_json({"event": "error", "error": f"Unknown event: {event}"})
        return

    await websocket.send_json({"event": "joined", "room": room})


@app.websocket("/ws")
async def realtime_socket(websocket: WebSocket) -> None:
    """
    Realtime channel for table and kitchen clients.

    Clients join rooms by sending:
        {"event": "joinTable", "tableNo": 4}
        {"event": "joinChef"}
    and then receive {"event": ..., "data": ...} pushes.
    """
    notifier = get_notifier()
    await websocket.accept()

    connection_id = uuid.uuid4().hex
    notifier.register(connection_id, websocket.send_json)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"event": "error", "error": "Invalid JSON"})
                continue
            await _handle_client_event(websocket, notifier, connection_id, message)
    except WebSocketDisconnect:
        pass
    finally:
        notifier.unsubscribe_all(connection_id)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, field=exc.field).model_dump(
            exclude_none=True
        ),
    )


@app.exception_handler(DependencyError)
async def dependency_error_handler(request: Request, exc: DependencyError) -> JSONResponse:
    logger.error(f"Dependency failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error="Service temporarily unavailable",
            detail=exc.message if settings.debug else None,
        ).model_dump(exclude_none=True),
    )


@app.exception_handler(OrderingError)
async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(exclude_none=True),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
