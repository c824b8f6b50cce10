# ============================================
# FILE: ordersaga/core/exceptions.py
# ============================================

"""
All order-related exceptions

Every error raised by the coordinator or its ports derives from OrderError,
so callers can catch the whole family in one place. The ``is_retryable``
flag tells a caller whether repeating the same operation is safe and useful.
"""

from typing import Any


class OrderError(Exception):
    """Base order error"""

    is_retryable = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class InvalidOrderError(OrderError, ValueError):
    """Order fields violate construction invariants"""

    def __init__(self, message: str, field: str | None = None, **details):
        super().__init__(message, details={"field": field, **details})
        self.field = field


class NotFoundError(OrderError):
    """
    Requested order does not exist.

    Terminal for the call: retrying with the same identifier will not help.
    """

    def __init__(
        self,
        message: str = "Item not found",
        item_type: str | None = "order",
        item_id: str | None = None,
        **details,
    ):
        super().__init__(
            message,
            details={"item_type": item_type, "item_id": item_id, **details},
        )
        self.item_type = item_type
        self.item_id = item_id


class ConflictStatusError(OrderError):
    """
    Order reached a different terminal status than the one requested.

    Raised when a confirmation and a cancellation race for the same order and
    the other one wins the status write after our inventory call succeeded.
    """

    def __init__(
        self,
        order_id: str,
        current_status: Any,
        requested_status: Any,
        message: str | None = None,
    ):
        current = getattr(current_status, "value", current_status)
        requested = getattr(requested_status, "value", requested_status)
        super().__init__(
            message or f"Order {order_id} is {current}, cannot become {requested}",
            details={
                "order_id": order_id,
                "current_status": current,
                "requested_status": requested,
            },
        )
        self.order_id = order_id
        self.current_status = current_status
        self.requested_status = requested_status


class DependencyFailure(OrderError):
    """
    Inventory participant call failed.

    Raised when:
    - Freeze is unknown or expired
    - Freeze was already released (for confirm) or confirmed (for release)
    - Inventory service is unreachable
    """

    is_retryable = True

    def __init__(
        self,
        message: str = "Inventory call failed",
        operation: str | None = None,  # "confirm" or "release"
        item_id: str | None = None,
        freeze_id: str | None = None,
        **details,
    ):
        super().__init__(
            message,
            details={
                "operation": operation,
                "item_id": item_id,
                "freeze_id": freeze_id,
                **details,
            },
        )
        self.operation = operation
        self.item_id = item_id
        self.freeze_id = freeze_id


class PersistenceFailure(OrderError):
    """Order store call failed"""

    is_retryable = True

    def __init__(
        self,
        message: str = "Order store operation failed",
        operation: str | None = None,  # "save", "find_by_id", "update_status"
        order_id: str | None = None,
        **details,
    ):
        super().__init__(
            message,
            details={"operation": operation, "order_id": order_id, **details},
        )
        self.operation = operation
        self.order_id = order_id
