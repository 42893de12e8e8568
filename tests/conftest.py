from __future__ import annotations

import os

# Tests never touch a real database unless they build their own engine
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["ENV_MODE"] = "development"

from typing import Any

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.database import build_session_maker, init_db
from app.services.menu import reset_menu_store
from app.services.order_service import OrderService, reset_order_service
from app.services.orders import InMemoryOrderStore, reset_order_store
from app.services.realtime import RealtimeNotifier, reset_notifier


class Recorder:
    """Fake websocket sender that keeps every message it is given."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def events(self) -> list[str]:
        return [m["event"] for m in self.messages]


@pytest.fixture(autouse=True)
def fresh_singletons():
    get_settings.cache_clear()
    reset_order_store()
    reset_menu_store()
    reset_notifier()
    reset_order_service()
    yield
    reset_order_service()
    reset_notifier()
    reset_menu_store()
    reset_order_store()
    get_settings.cache_clear()


@pytest.fixture()
def notifier() -> RealtimeNotifier:
    return RealtimeNotifier(kitchen_room="kitchen", send_timeout=0.5)


@pytest.fixture()
def kitchen(notifier: RealtimeNotifier) -> Recorder:
    recorder = Recorder()
    notifier.register("kitchen-display", recorder)
    notifier.subscribe_kitchen("kitchen-display")
    return recorder


@pytest.fixture()
def table_four(notifier: RealtimeNotifier) -> Recorder:
    recorder = Recorder()
    notifier.register("table-4-tablet", recorder)
    notifier.subscribe_table("table-4-tablet", 4)
    return recorder


@pytest.fixture()
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture()
def service(order_store: InMemoryOrderStore, notifier: RealtimeNotifier) -> OrderService:
    return OrderService(order_store, notifier, default_prep_time=15, prep_time_buffer=5)


@pytest.fixture()
async def sql_session_maker():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await init_db(engine)
    try:
        yield build_session_maker(engine)
    finally:
        await engine.dispose()
