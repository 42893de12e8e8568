"""
Domain Exceptions

Raised by the stores and the order service, translated to HTTP
responses by the handlers registered in app.main.

    ValidationError  -> 400
    NotFoundError    -> 404
    DependencyError  -> 503
"""

from typing import Optional


class OrderingError(Exception):
    """Base class for all ordering errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderingError):
    """Malformed or missing input. `field` names the offending input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(OrderingError):
    """Referenced order or menu item does not exist."""

    status_code = 404


class DependencyError(OrderingError):
    """Storage backend failed or is unreachable."""

    status_code = 503
