# ============================================
# FILE: ordersaga/types.py
# ============================================

"""
Order entity and status enum

An Order is a plain value: it validates its own fields on construction and
never changes afterwards. Status transitions are decided by the
OrderCoordinator, which produces new Order instances with
``dataclasses.replace``.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ordersaga.core.exceptions import InvalidOrderError


class OrderStatus(Enum):
    """
    Status of an order in its lifecycle.

    State transitions:
        PENDING → PAID      (inventory confirmed)
        PENDING → CANCELED  (inventory released)
        PENDING → FAILED    (reserved, never emitted automatically)
    """

    PENDING = "pending"
    """Order created, freeze still held"""

    PAID = "paid"
    """Inventory confirmed and payment recorded"""

    FAILED = "failed"
    """Order abandoned after a dependency failure"""

    CANCELED = "canceled"
    """Inventory released back to stock"""

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


TERMINAL_STATUSES = frozenset(
    {OrderStatus.PAID, OrderStatus.FAILED, OrderStatus.CANCELED}
)


def _require_text(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        msg = f"{name} must be a non-empty string"
        raise InvalidOrderError(msg, field=name)


@dataclass(frozen=True)
class Order:
    """
    One reservation-to-purchase attempt.

    Attributes:
        order_id: Globally unique order identifier
        user_id: Identifier of the purchasing user
        item_id: Identifier of the reserved item
        freeze_id: Opaque reference to the inventory freeze backing the order
        price: Unit price in minor currency units (e.g. cents)
        status: Current lifecycle status
        created_at: When the order was placed
        paid_at: When the order became PAID, None until then

    Example:
        >>> order = Order(
        ...     order_id="ord-1",
        ...     user_id="1",
        ...     item_id="42",
        ...     freeze_id="f-1",
        ...     price=500,
        ... )
        >>> order.status
        <OrderStatus.PENDING: 'pending'>
    """

    order_id: str
    user_id: str
    item_id: str
    freeze_id: str
    price: int
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    paid_at: datetime | None = None

    def __post_init__(self):
        """Validate construction invariants."""
        _require_text("order_id", self.order_id)
        _require_text("user_id", self.user_id)
        _require_text("item_id", self.item_id)
        _require_text("freeze_id", self.freeze_id)

        # bool is an int subclass but never a price
        if isinstance(self.price, bool) or not isinstance(self.price, int):
            msg = "price must be an integer amount of minor currency units"
            raise InvalidOrderError(msg, field="price", value=self.price)
        if self.price < 0:
            msg = "price must not be negative"
            raise InvalidOrderError(msg, field="price", value=self.price)

        if not isinstance(self.status, OrderStatus):
            msg = f"status must be an OrderStatus, got {self.status!r}"
            raise InvalidOrderError(msg, field="status")
        if self.paid_at is not None and self.status is not OrderStatus.PAID:
            msg = "paid_at can only be set on a paid order"
            raise InvalidOrderError(msg, field="paid_at", status=self.status.value)

    @property
    def is_pending(self) -> bool:
        return self.status is OrderStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_paid(self) -> bool:
        return self.status is OrderStatus.PAID

    def to_dict(self) -> dict[str, Any]:
        """Convert order to dictionary for serialization."""
        return {
            "order_id": self.order_id,
            "user_id": self.user_id,
            "item_id": self.item_id,
            "freeze_id": self.freeze_id,
            "price": self.price,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """Create order from dictionary."""
        return cls(
            order_id=data["order_id"],
            user_id=data["user_id"],
            item_id=data["item_id"],
            freeze_id=data["freeze_id"],
            price=data["price"],
            status=cls._parse_status(data.get("status", "pending")),
            created_at=cls._parse_datetime(data.get("created_at")) or datetime.now(UTC),
            paid_at=cls._parse_datetime(data.get("paid_at")),
        )

    @staticmethod
    def _parse_status(status: str | OrderStatus) -> OrderStatus:
        """Parse status from string or OrderStatus."""
        if isinstance(status, OrderStatus):
            return status
        try:
            return OrderStatus(status)
        except ValueError:
            msg = f"Unknown order status: {status!r}"
            raise InvalidOrderError(msg, field="status") from None

    @staticmethod
    def _parse_datetime(value: str | datetime | None) -> datetime | None:
        """Parse datetime from ISO string or datetime."""
        if value is None or isinstance(value, datetime):
            return value
        return datetime.fromisoformat(value)
