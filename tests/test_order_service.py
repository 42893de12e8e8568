from __future__ import annotations

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models import OrderStatus
from app.services.order_service import OrderService, is_terminal, parse_status
from app.services.orders import InMemoryOrderStore
from app.services.realtime import RealtimeNotifier
from tests.conftest import Recorder


PIZZA = {"name": "Pizza", "price": 349, "quantity": 2, "category": "main", "prepTime": 20}


async def test_place_order_returns_pending_order_with_estimate(
    service: OrderService, kitchen: Recorder, table_four: Recorder
) -> None:
    order = await service.place_order(4, [PIZZA], 698)

    assert order.id is not None
    assert order.status == OrderStatus.PENDING
    assert order.estimated_time == 25
    assert order.table_no == 4
    assert order.total == 698
    assert order.created_at == order.updated_at

    assert kitchen.events == ["newOrder"]
    assert table_four.events == ["orderConfirmed"]
    assert kitchen.messages[0]["data"] == order.to_dict()
    assert table_four.messages[0]["data"]["id"] == order.id


async def test_estimate_uses_default_for_items_without_prep_time(service: OrderService) -> None:
    items = [
        {"name": "Lime Soda", "price": 99, "quantity": 1},
        {"name": "Garlic Bread", "price": 149, "quantity": 1, "prepTime": 8},
    ]
    order = await service.place_order(2, items, 248)
    assert order.estimated_time == 20


async def test_estimate_takes_slowest_item(service: OrderService) -> None:
    items = [
        {"name": "Butter Chicken", "price": 449, "quantity": 1, "prep_time": 25},
        {"name": "Gulab Jamun", "price": 129, "quantity": 2, "prepTime": 5},
    ]
    order = await service.place_order(7, items, 707)
    assert order.estimated_time == 30


async def test_fractional_prep_time_rounds_up(service: OrderService) -> None:
    order = await service.place_order(
        3, [{"name": "Crispy Corn", "price": 229, "quantity": 1, "prepTime": 12.5}], 229
    )
    assert order.items[0].prep_time == 13
    assert order.estimated_time == 18


async def test_zero_prep_time_falls_back_to_default(service: OrderService) -> None:
    order = await service.place_order(
        1, [{"name": "Water", "price": 20, "quantity": 1, "prepTime": 0}], 20
    )
    assert order.estimated_time == 20


@pytest.mark.parametrize(
    "table_no, items, total, field",
    [
        (None, [PIZZA], 698, "tableNo"),
        (0, [PIZZA], 698, "tableNo"),
        (-3, [PIZZA], 698, "tableNo"),
        (True, [PIZZA], 698, "tableNo"),
        (4, None, 698, "items"),
        (4, [], 698, "items"),
        (4, "Pizza", 698, "items"),
        (4, [PIZZA], None, "total"),
        (4, [PIZZA], 0, "total"),
        (4, [{**PIZZA, "quantity": 0}], 698, "items[0].quantity"),
        (4, [PIZZA, {"price": 10, "quantity": 1}], 708, "items[1].name"),
        (4, [{**PIZZA, "price": -1}], 698, "items[0].price"),
        (4, [PIZZA], float("nan"), "total"),
        (4, [PIZZA], float("inf"), "total"),
        (4, [{**PIZZA, "price": float("nan")}], 698, "items[0].price"),
        (4, [{**PIZZA, "prepTime": float("inf")}], 698, "items[0].prepTime"),
        (4, [{**PIZZA, "prepTime": float("nan")}], 698, "items[0].prepTime"),
    ],
)
async def test_invalid_placement_is_rejected_without_side_effects(
    service: OrderService,
    order_store: InMemoryOrderStore,
    kitchen: Recorder,
    table_four: Recorder,
    table_no,
    items,
    total,
    field,
) -> None:
    with pytest.raises(ValidationError) as exc_info:
        await service.place_order(table_no, items, total)

    assert exc_info.value.field == field
    assert await order_store.find_all() == []
    assert kitchen.messages == []
    assert table_four.messages == []


async def test_total_mismatch_is_accepted(service: OrderService) -> None:
    order = await service.place_order(4, [PIZZA], 500)
    assert order.total == 500


async def test_get_order(service: OrderService) -> None:
    placed = await service.place_order(4, [PIZZA], 698)
    fetched = await service.get_order(placed.id)
    assert fetched == placed


async def test_get_missing_order(service: OrderService) -> None:
    with pytest.raises(NotFoundError):
        await service.get_order(404)


async def test_list_orders_newest_first_with_filters(service: OrderService) -> None:
    first = await service.place_order(4, [PIZZA], 698)
    second = await service.place_order(5, [PIZZA], 698)
    third = await service.place_order(4, [PIZZA], 698)
    await service.update_status(first.id, "ready")

    assert [o.id for o in await service.list_orders()] == [third.id, second.id, first.id]
    assert [o.id for o in await service.list_orders(table_no=4)] == [third.id, first.id]
    assert [o.id for o in await service.list_orders(status="pending")] == [third.id, second.id]
    assert [o.id for o in await service.list_orders(status="ready", table_no=4)] == [first.id]
    assert await service.list_orders(status="served") == []


async def test_list_orders_rejects_unknown_status(service: OrderService) -> None:
    with pytest.raises(ValidationError) as exc_info:
        await service.list_orders(status="burnt")
    assert exc_info.value.field == "status"


async def test_update_status_notifies_table_and_kitchen(
    service: OrderService, kitchen: Recorder, table_four: Recorder
) -> None:
    order = await service.place_order(4, [PIZZA], 698)
    await service.update_status(order.id, "preparing")

    updated = await service.update_status(order.id, "ready")

    assert updated.status == OrderStatus.READY
    assert table_four.messages[-1] == {
        "event": "orderStatusUpdate",
        "data": {
            "orderId": order.id,
            "status": "ready",
            "updatedAt": updated.updated_at.isoformat(),
        },
    }
    assert kitchen.messages[-1] == {
        "event": "orderStatusUpdated",
        "data": {"orderId": order.id, "status": "ready"},
    }


async def test_update_status_moves_updated_at_forward(service: OrderService) -> None:
    order = await service.place_order(4, [PIZZA], 698)
    before = (await service.get_order(order.id)).updated_at

    await service.update_status(order.id, "confirmed")

    after = await service.get_order(order.id)
    assert after.status == OrderStatus.CONFIRMED
    assert after.updated_at > before
    assert after.created_at == order.created_at


async def test_update_status_rejects_unknown_status(
    service: OrderService, kitchen: Recorder
) -> None:
    order = await service.place_order(4, [PIZZA], 698)

    for bad in ("done", "", None, "READY"):
        with pytest.raises(ValidationError):
            await service.update_status(order.id, bad)

    stored = await service.get_order(order.id)
    assert stored.status == OrderStatus.PENDING
    assert stored.updated_at == order.updated_at
    assert kitchen.events == ["newOrder"]


async def test_update_status_on_missing_order(service: OrderService, kitchen: Recorder) -> None:
    with pytest.raises(NotFoundError):
        await service.update_status(999, "ready")
    assert kitchen.messages == []


async def test_any_status_can_follow_any_other(service: OrderService) -> None:
    order = await service.place_order(4, [PIZZA], 698)
    served = await service.update_status(order.id, "served")
    assert served.status == OrderStatus.SERVED

    reopened = await service.update_status(order.id, "pending")
    assert reopened.status == OrderStatus.PENDING


async def test_failed_delivery_does_not_fail_placement(
    order_store: InMemoryOrderStore, notifier: RealtimeNotifier
) -> None:
    async def broken(message):
        raise ConnectionError("socket closed")

    notifier.register("stale", broken)
    notifier.subscribe_kitchen("stale")
    service = OrderService(order_store, notifier)

    order = await service.place_order(4, [PIZZA], 698)
    assert (await order_store.get_by_id(order.id)).status == OrderStatus.PENDING


async def test_publish_crash_does_not_fail_update(
    service: OrderService, notifier: RealtimeNotifier, monkeypatch
) -> None:
    order = await service.place_order(4, [PIZZA], 698)

    async def explode(room, event, payload):
        raise RuntimeError("notifier down")

    monkeypatch.setattr(notifier, "publish", explode)

    updated = await service.update_status(order.id, "cancelled")
    assert updated.status == OrderStatus.CANCELLED


def test_terminal_statuses() -> None:
    assert is_terminal(OrderStatus.SERVED)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.READY)


def test_parse_status() -> None:
    assert parse_status("preparing") == OrderStatus.PREPARING
    assert parse_status(OrderStatus.READY) == OrderStatus.READY
    with pytest.raises(ValidationError):
        parse_status("eaten")
