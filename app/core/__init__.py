"""
Core module initialization.
Exports configuration, logging utilities and domain exceptions.
"""

from app.core.config import get_settings, Settings, EnvironmentMode, StorageBackend
from app.core.exceptions import (
    OrderingError,
    ValidationError,
    NotFoundError,
    DependencyError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "StorageBackend",
    "OrderingError",
    "ValidationError",
    "NotFoundError",
    "DependencyError",
]
