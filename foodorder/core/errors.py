"""Custom exceptions for the food ordering backend."""
from typing import Optional


class FoodOrderError(Exception):
    """Base exception for all foodorder errors."""

    pass


class InvalidInput(FoodOrderError):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class Unauthorized(FoodOrderError):
    """Raised when the request carries no session or an unknown one."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(FoodOrderError):
    """Raised when the caller is authenticated but may not act on the resource."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(FoodOrderError):
    """Raised when an entity id doesn't exist."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")


class InvalidTransition(FoodOrderError):
    """Raised when a status change is not an edge of the order lifecycle."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")


class TerminalState(FoodOrderError):
    """Raised when mutating an order that is already delivered or cancelled."""

    def __init__(self, order_id: str, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Order {order_id} is already {status} and can no longer be changed")


class Conflict(FoodOrderError):
    """Raised when creating something that already exists."""

    pass


class StorageFailure(FoodOrderError):
    """Raised when the database is unreachable or rejects a write.

    The message never carries driver text; the underlying error is
    logged where it was caught.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("Storage is temporarily unavailable, please retry")


ERROR_STATUS_CODES = {
    InvalidInput: 400,
    Unauthorized: 401,
    Forbidden: 403,
    NotFound: 404,
    InvalidTransition: 400,
    TerminalState: 400,
    Conflict: 400,
    StorageFailure: 500,
}
