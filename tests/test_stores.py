from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.exceptions import DependencyError, NotFoundError, ValidationError
from app.database import build_session_maker
from app.models import MenuCategory, OrderStatus
from app.services.menu import MENU_SEED, InMemoryMenuStore, SqlMenuStore, ensure_menu_seeded
from app.services.menu.base import parse_category
from app.services.orders import InMemoryOrderStore, LineItem, NewOrder, SqlOrderStore


AVAILABLE_ITEMS = sum(1 for item in MENU_SEED if item.get("available", True))


def _new_order(table_no: int = 4) -> NewOrder:
    return NewOrder(
        table_no=table_no,
        items=[LineItem("Margherita Pizza", 349, 2, "main", 20)],
        total=698,
        estimated_time=25,
    )


@pytest.fixture(params=["memory", "sql"])
async def order_backend(request, sql_session_maker):
    if request.param == "memory":
        return InMemoryOrderStore()
    return SqlOrderStore(sql_session_maker)


@pytest.fixture(params=["memory", "sql"])
async def menu_backend(request, sql_session_maker):
    if request.param == "memory":
        return InMemoryMenuStore(MENU_SEED)
    store = SqlMenuStore(sql_session_maker)
    await store.seed(MENU_SEED)
    return store


# =============================================================================
# ORDER STORES
# =============================================================================

async def test_create_assigns_id_and_timestamps(order_backend) -> None:
    order = await order_backend.create(_new_order())

    assert order.id is not None
    assert order.status == OrderStatus.PENDING
    assert order.created_at.tzinfo is not None
    assert order.created_at == order.updated_at
    assert order.items[0].prep_time == 20


async def test_ids_are_unique(order_backend) -> None:
    ids = {(await order_backend.create(_new_order())).id for _ in range(5)}
    assert len(ids) == 5


async def test_round_trip_keeps_line_items(order_backend) -> None:
    created = await order_backend.create(_new_order(table_no=8))
    loaded = await order_backend.get_by_id(created.id)

    assert loaded.table_no == 8
    assert loaded.total == 698
    assert loaded.estimated_time == 25
    assert loaded.items == [LineItem("Margherita Pizza", 349, 2, "main", 20)]


async def test_missing_order(order_backend) -> None:
    with pytest.raises(NotFoundError):
        await order_backend.get_by_id(12345)
    with pytest.raises(NotFoundError):
        await order_backend.update_status(12345, OrderStatus.READY)


async def test_update_status_bumps_updated_at(order_backend) -> None:
    created = await order_backend.create(_new_order())

    first = await order_backend.update_status(created.id, OrderStatus.CONFIRMED)
    second = await order_backend.update_status(created.id, OrderStatus.PREPARING)

    assert second.status == OrderStatus.PREPARING
    assert created.updated_at < first.updated_at < second.updated_at
    assert (await order_backend.get_by_id(created.id)).status == OrderStatus.PREPARING


async def test_find_all_newest_first(order_backend) -> None:
    a = await order_backend.create(_new_order(table_no=1))
    b = await order_backend.create(_new_order(table_no=2))
    c = await order_backend.create(_new_order(table_no=1))
    await order_backend.update_status(b.id, OrderStatus.SERVED)

    assert [o.id for o in await order_backend.find_all()] == [c.id, b.id, a.id]
    assert [o.id for o in await order_backend.find_all(table_no=1)] == [c.id, a.id]
    assert [o.id for o in await order_backend.find_all(status=OrderStatus.SERVED)] == [b.id]
    assert await order_backend.find_all(status=OrderStatus.SERVED, table_no=1) == []


async def test_health_check(order_backend) -> None:
    assert await order_backend.health_check() is True


async def test_memory_store_hands_out_copies() -> None:
    store = InMemoryOrderStore()
    order = await store.create(_new_order())
    order.status = OrderStatus.CANCELLED

    assert (await store.get_by_id(order.id)).status == OrderStatus.PENDING


async def test_memory_store_line_items_are_not_shared() -> None:
    store = InMemoryOrderStore()
    order = await store.create(_new_order())
    order.items[0].quantity = 99
    order.items.append(LineItem("Gulab Jamun", 129, 1))

    stored = await store.get_by_id(order.id)
    assert len(stored.items) == 1
    assert stored.items[0].quantity == 2


@pytest.fixture()
async def unreachable_session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'orders.db'}")
    try:
        yield build_session_maker(engine)
    finally:
        await engine.dispose()


async def test_sql_order_store_reports_unreachable_database(unreachable_session_maker) -> None:
    store = SqlOrderStore(unreachable_session_maker)

    with pytest.raises(DependencyError):
        await store.create(_new_order())
    with pytest.raises(DependencyError):
        await store.get_by_id(1)
    with pytest.raises(DependencyError):
        await store.find_all()
    with pytest.raises(DependencyError):
        await store.update_status(1, OrderStatus.READY)
    assert await store.health_check() is False


async def test_sql_menu_store_reports_unreachable_database(unreachable_session_maker) -> None:
    store = SqlMenuStore(unreachable_session_maker)

    with pytest.raises(DependencyError):
        await store.list_available()
    with pytest.raises(DependencyError):
        await store.count()


# =============================================================================
# MENU STORES
# =============================================================================

async def test_list_available_hides_unavailable_items(menu_backend) -> None:
    items = await menu_backend.list_available()

    assert len(items) == AVAILABLE_ITEMS
    assert "Masala Chai" not in {item.name for item in items}


async def test_list_available_popular_first_then_rating(menu_backend) -> None:
    items = await menu_backend.list_available()

    assert items[0].name == "Butter Chicken"
    flags = [item.popular for item in items]
    assert flags == sorted(flags, reverse=True)
    popular_ratings = [item.rating for item in items if item.popular]
    assert popular_ratings == sorted(popular_ratings, reverse=True)


async def test_list_available_by_category(menu_backend) -> None:
    desserts = await menu_backend.list_available(MenuCategory.DESSERT)

    assert {item.name for item in desserts} == {
        "Chocolate Lava Cake", "Gulab Jamun", "Tiramisu"
    }
    assert desserts[0].name == "Chocolate Lava Cake"


async def test_get_menu_item(menu_backend) -> None:
    first = (await menu_backend.list_available())[0]
    fetched = await menu_backend.get_by_id(first.id)
    assert fetched == first


async def test_memory_menu_items_are_copies() -> None:
    store = InMemoryMenuStore(MENU_SEED)
    item = (await store.list_available())[0]
    item.available = False

    assert (await store.get_by_id(item.id)).available is True


async def test_get_missing_menu_item(menu_backend) -> None:
    with pytest.raises(NotFoundError):
        await menu_backend.get_by_id(999)


async def test_seed_replaces_catalog(menu_backend) -> None:
    count = await menu_backend.seed(MENU_SEED[:3])

    assert count == 3
    assert await menu_backend.count() == 3


async def test_ensure_menu_seeded_fills_empty_store(sql_session_maker) -> None:
    store = SqlMenuStore(sql_session_maker)
    assert await store.count() == 0

    assert await ensure_menu_seeded(store) == len(MENU_SEED)
    assert await ensure_menu_seeded(store) == len(MENU_SEED)


def test_parse_category() -> None:
    assert parse_category(None) is None
    assert parse_category("Main") == MenuCategory.MAIN
    with pytest.raises(ValidationError) as exc_info:
        parse_category("brunch")
    assert exc_info.value.field == "category"
