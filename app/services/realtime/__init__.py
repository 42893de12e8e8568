"""
Realtime Notifier Factory

One notifier per process, shared by the websocket endpoint and the
order service.
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.services.realtime.notifier import RealtimeNotifier, Sender, table_room

logger = logging.getLogger(__name__)


@lru_cache()
def get_notifier() -> RealtimeNotifier:
    """Get the process-wide notifier."""
    settings = get_settings()
    logger.info(f"Realtime Notifier: kitchen room '{settings.kitchen_room}'")
    return RealtimeNotifier(
        kitchen_room=settings.kitchen_room,
        send_timeout=settings.notify_send_timeout_seconds,
    )


def reset_notifier() -> None:
    """Clear the cached notifier (drops all room memberships)."""
    get_notifier.cache_clear()


__all__ = [
    "get_notifier",
    "reset_notifier",
    "RealtimeNotifier",
    "Sender",
    "table_room",
]
